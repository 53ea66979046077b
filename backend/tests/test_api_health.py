"""API tests for health endpoints, the root endpoint and the error envelope."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import auth_headers
from coursehub.services import storage


class TestHealth:
    def test_ping(self, client):
        resp = client.get("/api/ping")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert "no-cache" in resp.headers["cache-control"]

    def test_health_ok(self, client):
        storage.media_dir(storage.VIDEOS)
        storage.media_dir(storage.THUMBNAILS)
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_health_missing_upload_dirs(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 503
        assert resp.json()["checks"]["uploads"]["status"] == "unhealthy"

    def test_detailed_requires_admin(self, client, make_user):
        assert client.get("/api/health/detailed").status_code == 401
        assert client.get("/api/health/detailed", headers=auth_headers(make_user())).status_code == 403

    def test_detailed(self, client, make_user, make_course):
        storage.media_dir(storage.VIDEOS)
        storage.media_dir(storage.THUMBNAILS)
        admin = make_user(role="admin")
        make_course()
        body = client.get("/api/health/detailed", headers=auth_headers(admin)).json()
        assert body["checks"]["database"]["counts"]["courses"] == 1
        assert body["checks"]["uploads"]["videos_size"] == 0


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        resp = client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Not Found", "code": "NOT_FOUND"}

    def test_bad_token(self, client):
        resp = client.get("/api/profile", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401
        assert resp.json()["success"] is False
        assert resp.json()["code"] == "UNAUTHORIZED"

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
