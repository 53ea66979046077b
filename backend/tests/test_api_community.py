"""API tests for reviews, news, profile, contact and the admin logs/users/settings pages."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from conftest import auth_headers
from coursehub.models import AuditLog, News, Review
from coursehub.services import mailer


class TestReviews:
    """/api/reviews and /api/admin/reviews"""

    def test_one_pending_review_at_a_time(self, client, make_user):
        headers = auth_headers(make_user())
        first = client.post("/api/reviews", json={"rating": 5, "comment": " Great "}, headers=headers)
        assert first.status_code == 201
        assert first.json()["data"]["status"] == "pending"
        assert first.json()["data"]["comment"] == "Great"

        second = client.post("/api/reviews", json={"rating": 4}, headers=headers)
        assert second.status_code == 409

    def test_rating_bounds(self, client, make_user):
        resp = client.post("/api/reviews", json={"rating": 6}, headers=auth_headers(make_user()))
        assert resp.status_code == 400

    def test_public_list_shows_only_approved(self, client, make_user):
        admin, user = make_user(role="admin"), make_user(name="Ann")
        review_id = client.post("/api/reviews", json={"rating": 5}, headers=auth_headers(user)).json()["data"]["id"]
        assert client.get("/api/reviews").json()["data"] == []

        client.patch(f"/api/admin/reviews/{review_id}", json={"status": "approved"}, headers=auth_headers(admin))
        public = client.get("/api/reviews").json()["data"]
        assert len(public) == 1
        assert public[0]["author_name"] == "Ann"

    def test_admin_list_stats(self, client, make_user, db):
        admin, user = make_user(role="admin"), make_user()
        db.add_all([
            Review(user_id=user.id, rating=5, status="approved"),
            Review(user_id=user.id, rating=3, status="pending"),
            Review(user_id=user.id, rating=1, status="rejected"),
        ])
        db.commit()
        data = client.get("/api/admin/reviews?status=pending", headers=auth_headers(admin)).json()["data"]
        assert len(data["reviews"]) == 1
        assert data["pagination"]["total"] == 1
        assert data["stats"] == {"pending": 1, "approved": 1, "rejected": 1, "total": 3}

    def test_delete_own_review_only(self, client, make_user):
        author, other = make_user(), make_user()
        review_id = client.post("/api/reviews", json={"rating": 5}, headers=auth_headers(author)).json()["data"]["id"]
        assert client.delete(f"/api/reviews/{review_id}", headers=auth_headers(other)).status_code == 404
        assert client.delete(f"/api/reviews/{review_id}", headers=auth_headers(author)).status_code == 200


class TestNews:
    """/api/news and /api/admin/news"""

    def test_publish_and_read(self, client, make_user):
        admin = make_user(role="admin", name="Editor")
        created = client.post(
            "/api/admin/news",
            json={"title": "Launch", "short_description": "We are live", "full_description": "All the details"},
            headers=auth_headers(admin),
        )
        assert created.status_code == 201
        news_id = created.json()["data"]["id"]

        listed = client.get("/api/news").json()["data"]
        assert listed["pagination"]["total"] == 1
        assert listed["news"][0]["full_description"] is None

        detail = client.get(f"/api/news/{news_id}").json()["data"]
        assert detail["full_description"] == "All the details"
        assert detail["author_name"] == "Editor"

    def test_inactive_news_hidden(self, client, make_user, db):
        db.add(News(title="Draft", short_description="s", full_description="f", is_active=False))
        db.commit()
        news_id = db.query(News.id).scalar()
        assert client.get("/api/news").json()["data"]["news"] == []
        assert client.get(f"/api/news/{news_id}").status_code == 404
        admin_list = client.get("/api/admin/news", headers=auth_headers(make_user(role="admin"))).json()["data"]
        assert len(admin_list["news"]) == 1

    def test_update_and_delete(self, client, make_user, db):
        admin = make_user(role="admin")
        headers = auth_headers(admin)
        news_id = client.post(
            "/api/admin/news",
            json={"title": "Old", "short_description": "s", "full_description": "f"},
            headers=headers,
        ).json()["data"]["id"]

        updated = client.put(f"/api/admin/news/{news_id}", json={"title": "New"}, headers=headers)
        assert updated.json()["data"]["title"] == "New"
        assert client.delete(f"/api/admin/news/{news_id}", headers=headers).status_code == 200
        assert client.get(f"/api/admin/news/{news_id}", headers=headers).status_code == 404
        assert db.query(AuditLog).filter(AuditLog.action == "news_deleted").count() == 1

    def test_update_rejects_null_title(self, client, make_user):
        headers = auth_headers(make_user(role="admin"))
        news_id = client.post(
            "/api/admin/news",
            json={"title": "Kept", "short_description": "s", "full_description": "f"},
            headers=headers,
        ).json()["data"]["id"]
        resp = client.put(f"/api/admin/news/{news_id}", json={"title": None}, headers=headers)
        assert resp.status_code == 400
        assert client.get(f"/api/news/{news_id}").json()["data"]["title"] == "Kept"


class TestProfile:
    """/api/profile"""

    def test_update_contacts(self, client, make_user):
        headers = auth_headers(make_user())
        resp = client.patch(
            "/api/profile",
            json={"phone": " +123 ", "telegram": "", "preferred_contact": "phone"},
            headers=headers,
        )
        assert resp.status_code == 200
        profile = client.get("/api/profile", headers=headers).json()["data"]["user"]
        assert profile["phone"] == "+123"
        assert profile["telegram"] == ""
        assert profile["preferred_contact"] == "phone"

    def test_stats(self, client, make_user, make_course, grant):
        user = make_user()
        grant(user, make_course("A"))
        grant(user, make_course("B"))
        data = client.get("/api/profile/stats", headers=auth_headers(user)).json()["data"]
        assert data["purchased_courses"] == 2

    def test_requires_login(self, client):
        assert client.get("/api/profile").status_code == 401


class TestContact:
    """/api/contact"""

    FORM = {"name": "Ann", "email": "ann@example.com", "subject": "courses", "message": "Hello"}

    @pytest.fixture
    def sent(self, monkeypatch):
        calls = []

        async def fake_send(to, name, email, subject, message):
            calls.append({"to": to, "email": email, "subject": subject})
            return mailer.contact_subject(subject)

        monkeypatch.setattr(mailer, "send_contact_mail", fake_send)
        return calls

    def _configure(self, client, make_user, email="support@example.com"):
        admin = make_user(role="admin")
        resp = client.put("/api/admin/settings", json={"support_email": email}, headers=auth_headers(admin))
        assert resp.status_code == 200

    def test_unconfigured_support_email(self, client, sent):
        resp = client.post("/api/contact/send", json=self.FORM)
        assert resp.status_code == 503
        assert sent == []

    def test_send(self, client, make_user, sent, db):
        self._configure(client, make_user)
        resp = client.post("/api/contact/send", json=self.FORM)
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert sent == [{"to": "support@example.com", "email": "ann@example.com", "subject": "courses"}]
        log = db.query(AuditLog).filter(AuditLog.action == "contact_form_sent").one()
        assert "[Site] Questions about courses" in log.details

    def test_mail_failure(self, client, make_user, monkeypatch):
        self._configure(client, make_user)

        async def broken(*args):
            raise ConnectionError("smtp down")

        monkeypatch.setattr(mailer, "send_contact_mail", broken)
        resp = client.post("/api/contact/send", json=self.FORM)
        assert resp.status_code == 500
        assert resp.json()["success"] is False

    def test_invalid_email(self, client, make_user, sent):
        self._configure(client, make_user)
        resp = client.post("/api/contact/send", json={**self.FORM, "email": "not-an-email"})
        assert resp.status_code == 400

    def test_info(self, client, make_user):
        assert client.get("/api/contact/info").status_code == 404
        make_user(role="admin", telegram="@boss")
        assert client.get("/api/contact/info").json()["data"] == {"telegram": "@boss"}


class TestMailer:
    def test_subject_labels(self):
        assert mailer.contact_subject("technical") == "[Site] Technical support"
        assert mailer.contact_subject(None) == "[Site] New message"

    def test_body_is_escaped(self):
        body = mailer.render_contact_body("<b>Ann</b>", "ann@example.com", "other", "line1\n<script>")
        assert "&lt;b&gt;Ann&lt;/b&gt;" in body
        assert "line1<br>&lt;script&gt;" in body


class TestAdminPages:
    """/api/admin/users, /api/admin/logs and /api/admin/settings"""

    def test_users_with_counts(self, client, make_user, make_course, grant):
        admin, user = make_user(role="admin"), make_user()
        grant(user, make_course())
        data = client.get("/api/admin/users", headers=auth_headers(admin)).json()["data"]
        assert data["pagination"]["total"] == 2
        by_id = {u["id"]: u for u in data["users"]}
        assert by_id[user.id]["courses_access"] == 1
        assert by_id[admin.id]["courses_access"] == 0

    def test_logs_filters(self, client, make_user, db):
        admin = make_user(role="admin")
        db.add_all([
            AuditLog(action="course_created", details="Created Python"),
            AuditLog(action="video_deleted", details="Removed intro"),
        ])
        db.commit()
        headers = auth_headers(admin)

        by_action = client.get("/api/admin/logs?action=video", headers=headers).json()["data"]
        assert [entry["action"] for entry in by_action["logs"]] == ["video_deleted"]
        assert by_action["actions"] == ["course_created", "video_deleted"]

        by_text = client.get("/api/admin/logs?search=Python", headers=headers).json()["data"]
        assert len(by_text["logs"]) == 1

        future = client.get("/api/admin/logs?date_from=2999-01-01", headers=headers).json()["data"]
        assert future["logs"] == []

    def test_settings_roundtrip(self, client, make_user):
        headers = auth_headers(make_user(role="admin"))
        assert client.get("/api/admin/settings", headers=headers).json()["data"] == {"support_email": None}
        client.put("/api/admin/settings", json={"support_email": "help@example.com"}, headers=headers)
        assert client.get("/api/admin/settings", headers=headers).json()["data"]["support_email"] == "help@example.com"
