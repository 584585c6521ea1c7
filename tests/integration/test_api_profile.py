"""Integration tests for /profile, /settings and /reset routes."""
import pytest
from fastapi.testclient import TestClient

from drively.api.main import create_app


@pytest.fixture(name="client")
def client_fixture(coordinator):
    app = create_app(coordinator, start_scheduler=False)
    with TestClient(app) as c:
        yield c


class TestProfile:
    def test_defaults(self, client):
        data = client.get("/profile").json()
        assert data["goalDayHours"] == 50
        assert data["goalNightHours"] == 10
        assert data["licenseType"] is None
        assert data["onboardingComplete"] is False

    def test_patch(self, client):
        resp = client.patch("/profile", json={"licenseType": "learners", "goalDayHours": 40})
        assert resp.status_code == 200
        assert resp.json()["licenseType"] == "learners"
        assert resp.json()["goalDayHours"] == 40

    def test_completed_hours_not_settable(self, client):
        resp = client.patch("/profile", json={"completedDayHours": 99})
        assert resp.status_code == 422

    def test_unknown_license_rejected(self, client):
        resp = client.patch("/profile", json={"licenseType": "pilot"})
        assert resp.status_code == 422

    def test_zero_total_goal_rejected(self, client):
        resp = client.patch("/profile", json={"goalDayHours": 0, "goalNightHours": 0})
        assert resp.status_code == 400

    def test_license_locked_after_onboarding(self, client):
        client.patch("/profile", json={"licenseType": "learners"})
        assert client.post("/profile/onboarding").json()["onboardingComplete"] is True
        resp = client.patch("/profile", json={"licenseType": "restricted"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("preset, day, night", [
        ("basic", 25, 0),
        ("standard", 40, 10),
        ("comprehensive", 50, 10),
    ])
    def test_goal_preset(self, client, preset, day, night):
        resp = client.patch("/profile", json={"preset": preset})
        assert resp.status_code == 200
        assert resp.json()["goalDayHours"] == day
        assert resp.json()["goalNightHours"] == night

    def test_preset_with_explicit_goals_rejected(self, client):
        resp = client.patch("/profile", json={"preset": "basic", "goalDayHours": 30})
        assert resp.status_code == 400
        assert client.get("/profile").json()["goalDayHours"] == 50

    def test_unknown_preset_rejected(self, client):
        assert client.patch("/profile", json={"preset": "extreme"}).status_code == 422

    def test_list_presets(self, client):
        presets = client.get("/profile/presets").json()
        assert [p["preset"] for p in presets] == ["basic", "standard", "comprehensive"]
        assert presets[0]["goal_night_hours"] == 0


class TestSettings:
    def test_defaults(self, client):
        data = client.get("/settings").json()
        assert data["nightTimeStart"] == "18:00"
        assert data["nightTimeEnd"] == "06:00"
        assert data["temperatureUnit"] == "metric"

    def test_patch_night_window_applies_to_new_drives(self, client):
        resp = client.patch("/settings", json={"nightTimeStart": "22:00", "nightTimeEnd": "05:00"})
        assert resp.status_code == 200
        drive = client.post("/drives", json={
            "date": "2024-06-15", "startTime": "19:00", "endTime": "20:00",
        }).json()
        assert drive["isNightDrive"] is False

    def test_invalid_time_rejected(self, client):
        resp = client.patch("/settings", json={"nightTimeStart": "7pm"})
        assert resp.status_code == 422

    def test_mark_backed_up(self, client):
        resp = client.post("/settings/backup")
        assert resp.status_code == 200
        assert resp.json()["lastBackupDate"] == "2024-06-15"
        assert client.get("/settings").json()["lastBackupDate"] == "2024-06-15"


class TestReset:
    def test_requires_confirm(self, client):
        assert client.post("/reset", json={}).status_code == 400

    def test_reset(self, client):
        client.post("/drives", json={"date": "2024-06-15", "startTime": "10:00", "endTime": "10:30"})
        client.patch("/profile", json={"licenseType": "learners"})
        resp = client.post("/reset", json={"confirm": True})
        assert resp.status_code == 200
        data = resp.json()
        assert data["drives"] == []
        assert data["user"]["licenseType"] is None
        assert client.get("/document").json()["drives"] == []
