"""API tests for the public catalog, video detail and streaming."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import auth_headers, write_upload


class TestCourseList:
    """GET /api/courses"""

    def test_lists_active_courses_with_access_flags(self, client, make_user, make_course, make_video, grant):
        user = make_user()
        paid = make_course("Paid")
        free = make_course("Free", is_free=True)
        owned = make_course("Owned")
        make_course("Hidden", is_active=False)
        make_video(paid, "a.mp4", is_free=True, duration=60)
        make_video(paid, "b.mp4", duration=120)
        grant(user, owned)

        resp = client.get("/api/courses", headers=auth_headers(user))
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        by_title = {c["title"]: c for c in body["data"]}
        assert set(by_title) == {"Paid", "Free", "Owned"}
        assert by_title["Paid"]["has_access"] is False
        assert by_title["Paid"]["videos_count"] == 2
        assert by_title["Paid"]["free_videos_count"] == 1
        assert by_title["Free"]["has_access"] is True
        assert by_title["Owned"]["has_access"] is True

    def test_type_filter(self, client, make_course):
        make_course("Paid")
        make_course("Free", is_free=True)
        free = client.get("/api/courses?type=free").json()["data"]
        paid = client.get("/api/courses?type=paid").json()["data"]
        assert [c["title"] for c in free] == ["Free"]
        assert [c["title"] for c in paid] == ["Paid"]

    def test_invalid_type_is_400(self, client):
        resp = client.get("/api/courses?type=bogus")
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_admin_has_access_everywhere(self, client, make_user, make_course):
        make_course("Paid")
        data = client.get("/api/courses", headers=auth_headers(make_user(role="admin"))).json()["data"]
        assert all(c["has_access"] for c in data)

    def test_invalid_token_is_401(self, client):
        resp = client.get("/api/courses", headers={"Authorization": "Bearer nonsense"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"


class TestCourseDetail:
    """GET /api/courses/{id}"""

    def test_per_video_access(self, client, make_course, make_video):
        course = make_course()
        make_video(course, "b.mp4", order_index=1)
        make_video(course, "a.mp4", is_free=True, order_index=0)
        data = client.get(f"/api/courses/{course.id}").json()["data"]
        assert data["has_access"] is False
        assert [v["title"] for v in data["videos"]] == ["a.mp4", "b.mp4"]
        assert [v["has_access"] for v in data["videos"]] == [True, False]

    def test_missing_course(self, client):
        resp = client.get("/api/courses/nope")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Course not found", "code": "NOT_FOUND"}


class TestVideoDetail:
    """GET /api/videos/{id}"""

    def test_url_hidden_without_access(self, client, make_course, make_video):
        video = make_video(make_course())
        data = client.get(f"/api/videos/{video.id}").json()["data"]
        assert data["has_access"] is False
        assert data["video_url"] is None

    def test_url_given_with_grant(self, client, make_user, make_course, make_video, grant):
        user, course = make_user(), make_course()
        video = make_video(course)
        grant(user, course)
        data = client.get(f"/api/videos/{video.id}", headers=auth_headers(user)).json()["data"]
        assert data["has_access"] is True
        assert data["video_url"] == f"/api/videos/{video.id}/stream"


class TestStreaming:
    """GET /api/videos/{id}/stream"""

    def _free_video(self, make_course, make_video, size=1000):
        video = make_video(make_course(is_free=True), "clip.mp4")
        write_upload("videos", "clip.mp4", bytes(i % 256 for i in range(size)))
        return video

    def test_range_request_returns_206(self, client, make_course, make_video):
        video = self._free_video(make_course, make_video)
        resp = client.get(f"/api/videos/{video.id}/stream", headers={"Range": "bytes=0-99"})
        assert resp.status_code == 206
        assert resp.headers["content-range"] == "bytes 0-99/1000"
        assert resp.headers["content-length"] == "100"
        assert resp.content == bytes(range(100))

    def test_no_range_returns_full_file(self, client, make_course, make_video):
        video = self._free_video(make_course, make_video)
        resp = client.get(f"/api/videos/{video.id}/stream")
        assert resp.status_code == 200
        assert resp.headers["accept-ranges"] == "bytes"
        assert len(resp.content) == 1000

    def test_unsatisfiable_range(self, client, make_course, make_video):
        video = self._free_video(make_course, make_video)
        resp = client.get(f"/api/videos/{video.id}/stream", headers={"Range": "bytes=5000-"})
        assert resp.status_code == 416
        assert resp.headers["content-range"] == "bytes */1000"

    def test_forbidden_without_access(self, client, make_user, make_course, make_video):
        video = make_video(make_course(), "paid.mp4")
        write_upload("videos", "paid.mp4", b"\x00" * 10)
        resp = client.get(f"/api/videos/{video.id}/stream", headers=auth_headers(make_user()))
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_missing_file_is_404(self, client, make_course, make_video):
        video = make_video(make_course(is_free=True), "gone.mp4")
        assert client.get(f"/api/videos/{video.id}/stream").status_code == 404

    def test_admin_streams_inactive_course(self, client, make_user, make_course, make_video):
        video = make_video(make_course(is_active=False), "hidden.mp4")
        write_upload("videos", "hidden.mp4", bytes(i % 256 for i in range(1000)))
        resp = client.get(
            f"/api/videos/{video.id}/stream",
            headers={"Range": "bytes=0-99", **auth_headers(make_user(role="admin"))},
        )
        assert resp.status_code == 206
        assert resp.headers["content-range"] == "bytes 0-99/1000"

    def test_inactive_course_hidden_from_users(self, client, make_user, make_course, make_video, grant):
        user, course = make_user(), make_course(is_active=False)
        video = make_video(course, "hidden.mp4")
        grant(user, course)
        write_upload("videos", "hidden.mp4", b"\x00" * 10)
        resp = client.get(f"/api/videos/{video.id}/stream", headers=auth_headers(user))
        assert resp.status_code == 404


class TestThumbnails:
    """GET /api/uploads/thumbnails/{name}"""

    def test_serves_with_cache_header(self, client):
        write_upload("thumbnails", "thumbnail_1.png", b"\x89PNG....")
        resp = client.get("/api/uploads/thumbnails/thumbnail_1.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert "max-age=31536000" in resp.headers["cache-control"]

    def test_missing(self, client):
        assert client.get("/api/uploads/thumbnails/none.png").status_code == 404
