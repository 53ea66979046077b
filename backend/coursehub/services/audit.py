"""Audit log writer.

Rows are added to the caller's session and committed with the change they
describe.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from coursehub.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    action: str,
    details: str,
    actor_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
) -> AuditLog:
    entry = AuditLog(
        action=action,
        details=details,
        actor_id=actor_id,
        entity_type=entity_type,
        entity_id=entity_id,
    )
    db.add(entry)
    logger.info("%s: %s", action, details)
    return entry
