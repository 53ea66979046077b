"""API tests for the course request flow, user side and admin side."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import auth_headers


def _submit(client, user, course, method="email"):
    return client.post(
        "/api/course-request",
        json={"course_id": course.id, "contact_method": method, "message": "hi"},
        headers=auth_headers(user),
    )


class TestUserRequests:
    """/api/course-request"""

    def test_requires_login(self, client, make_course):
        resp = client.post("/api/course-request", json={"course_id": make_course().id, "contact_method": "email"})
        assert resp.status_code == 401

    def test_submit_and_duplicate(self, client, make_user, make_course):
        user, course = make_user(), make_course()
        first = _submit(client, user, course)
        assert first.status_code == 200
        assert first.json()["data"]["status"] == "new"

        second = _submit(client, user, course)
        assert second.status_code == 409
        assert second.json()["success"] is False
        assert second.json()["code"] == "CONFLICT"

    def test_bad_contact_method(self, client, make_user, make_course):
        resp = _submit(client, make_user(), make_course(), method="pigeon")
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_cancel_and_status(self, client, make_user, make_course):
        user, course = make_user(), make_course()
        _submit(client, user, course)

        status = client.get(f"/api/course-request/status?course_id={course.id}", headers=auth_headers(user))
        assert status.json()["data"]["can_cancel"] is True

        resp = client.delete(f"/api/course-request?course_id={course.id}", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "cancelled"

        status = client.get(f"/api/course-request/status?course_id={course.id}", headers=auth_headers(user))
        assert status.json()["data"]["status"] == "no_request"

    def test_cancel_without_request(self, client, make_user, make_course):
        resp = client.delete(f"/api/course-request?course_id={make_course().id}", headers=auth_headers(make_user()))
        assert resp.status_code == 404


class TestAdminRequests:
    """/api/admin/requests"""

    def test_non_admin_forbidden(self, client, make_user):
        resp = client.get("/api/admin/requests", headers=auth_headers(make_user()))
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_list_grouped_with_stats(self, client, make_user, make_course):
        admin = make_user(role="admin", telegram="@boss")
        user = make_user(phone="+100")
        _submit(client, user, make_course("A"))
        _submit(client, user, make_course("B"))

        data = client.get("/api/admin/requests", headers=auth_headers(admin)).json()["data"]
        assert data["stats"]["total"] == 2
        assert data["stats"]["new"] == 2
        assert len(data["grouped"]["new"]) == 2
        assert data["grouped"]["approved"] == []
        assert data["requests"][0]["user"]["phone"] == "+100"

    def test_approve_grants_access_once(self, client, make_user, make_course, make_video):
        admin, user, course = make_user(role="admin"), make_user(), make_course()
        video = make_video(course)
        request_id = _submit(client, user, course).json()["data"]["id"]

        resp = client.patch(
            f"/api/admin/requests/{request_id}",
            json={"status": "approved"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "approved"

        again = client.patch(
            f"/api/admin/requests/{request_id}",
            json={"status": "approved"},
            headers=auth_headers(admin),
        )
        assert again.status_code == 409

        detail = client.get(f"/api/videos/{video.id}", headers=auth_headers(user)).json()["data"]
        assert detail["has_access"] is True

        access = client.get(f"/api/admin/courses/{course.id}/access", headers=auth_headers(admin)).json()["data"]
        assert len(access) == 1
        assert access[0]["user_id"] == user.id

    def test_reject_then_reopen(self, client, make_user, make_course):
        admin, user, course = make_user(role="admin"), make_user(), make_course()
        request_id = _submit(client, user, course).json()["data"]["id"]
        client.patch(f"/api/admin/requests/{request_id}", json={"status": "rejected"}, headers=auth_headers(admin))

        reopened = _submit(client, user, course).json()["data"]
        assert reopened["id"] == request_id
        assert reopened["status"] == "new"
        assert reopened["processed_at"] is None

    def test_invalid_decision(self, client, make_user, make_course):
        admin, user, course = make_user(role="admin"), make_user(), make_course()
        request_id = _submit(client, user, course).json()["data"]["id"]
        resp = client.patch(f"/api/admin/requests/{request_id}", json={"status": "cancelled"}, headers=auth_headers(admin))
        assert resp.status_code == 400

    def test_revoke_access(self, client, make_user, make_course, grant):
        admin, user, course = make_user(role="admin"), make_user(), make_course()
        grant(user, course)
        resp = client.delete(f"/api/admin/courses/{course.id}/access/{user.id}", headers=auth_headers(admin))
        assert resp.status_code == 200
        status = client.get(f"/api/course-request/status?course_id={course.id}", headers=auth_headers(user))
        assert status.json()["data"]["has_access"] is False
