"""coursehub — video course platform backend."""

__version__ = "1.0.0"
