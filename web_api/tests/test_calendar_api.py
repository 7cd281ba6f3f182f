"""Tests for the study calendar endpoints."""

import pytest

from core.storage import DocumentKind


class TestSaveCalendar:
    """Tests for POST /api/save-calendar."""

    def test_saves_calendar(self, client, store):
        calendar = {"2024-05-01": {"minutes": 45}, "2024-05-02": {"minutes": 30}}
        response = client.post(
            "/api/save-calendar", json={"username": "bob", "calendarData": calendar}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert store.load("bob", DocumentKind.CALENDAR) == calendar

    def test_missing_calendar_data(self, client, store):
        """Should return 400 when calendarData is absent."""
        response = client.post("/api/save-calendar", json={"username": "bob"})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert list(store.data_dir.iterdir()) == []

    def test_missing_username(self, client):
        response = client.post("/api/save-calendar", json={"calendarData": {"d": 1}})
        assert response.status_code == 400

    def test_does_not_touch_user_data(self, client, store):
        """Calendar and user data are stored independently."""
        client.post("/api/save-calendar", json={"username": "bob", "calendarData": {"d": 1}})
        assert store.load("bob", DocumentKind.DATA) is None

    def test_write_failure(self, client, store, monkeypatch):
        def failing_write(path, document):
            raise PermissionError("Permission denied")

        monkeypatch.setattr(store, "write", failing_write)

        response = client.post(
            "/api/save-calendar", json={"username": "bob", "calendarData": {"d": 1}}
        )
        assert response.status_code == 500
        assert "Permission denied" in response.json()["error"]


class TestGetCalendar:
    """Tests for GET /api/get-calendar/{username}."""

    def test_no_saved_calendar(self, client):
        """Should return an empty object, not null, when nothing was saved."""
        response = client.get("/api/get-calendar/bob")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["calendarData"] == {}
        assert body["message"]

    def test_round_trip(self, client):
        calendar = {"2024-05-01": ["flashcards", "essay"]}
        client.post("/api/save-calendar", json={"username": "bob", "calendarData": calendar})

        response = client.get("/api/get-calendar/bob")
        assert response.status_code == 200
        assert response.json() == {"success": True, "calendarData": calendar}

    def test_overwrite_replaces(self, client):
        client.post("/api/save-calendar", json={"username": "bob", "calendarData": {"a": 1}})
        client.post("/api/save-calendar", json={"username": "bob", "calendarData": {"b": 2}})
        assert client.get("/api/get-calendar/bob").json()["calendarData"] == {"b": 2}

    def test_malformed_file(self, client, store):
        store.path_for("bob", DocumentKind.CALENDAR).write_text("[1, 2", encoding="utf-8")

        response = client.get("/api/get-calendar/bob")
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]


class TestCalendarRequestValidation:
    """Request checks shared with the user data endpoints."""

    def test_rejects_path_traversal(self, client, store, tmp_path):
        """Should refuse usernames that would escape the data directory."""
        response = client.post(
            "/api/save-calendar", json={"username": "../evil", "calendarData": {"d": 1}}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert not (tmp_path / "evil_calendar.json").exists()
        assert list(store.data_dir.iterdir()) == []

    def test_get_invalid_username(self, client):
        response = client.get("/api/get-calendar/a%5Cb")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_malformed_body(self, client):
        """Should return a 400 envelope instead of a framework error page."""
        response = client.post(
            "/api/save-calendar",
            content=b'{"username": "bob", "calendarData": ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_body_not_an_object(self, client):
        response = client.post("/api/save-calendar", json=[{"d": 1}])
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.parametrize("literal", [b"NaN", b"Infinity"])
    def test_save_rejects_non_finite(self, client, store, literal):
        response = client.post(
            "/api/save-calendar",
            content=b'{"username": "bob", "calendarData": {"2024-05-01": ' + literal + b"}}",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert list(store.data_dir.iterdir()) == []

    def test_get_tampered_file_returns_envelope(self, client, store):
        store.path_for("bob", DocumentKind.CALENDAR).write_text(
            '{"2024-05-01": Infinity}', encoding="utf-8"
        )

        response = client.get("/api/get-calendar/bob")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json()["success"] is False
