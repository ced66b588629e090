"""
HTTP API tests.
"""
import pytest
from fastapi.testclient import TestClient

from incentives.constants import API_KEY
from incentives.cache import TTLCache
from incentives.database import get_db
from incentives.main import app, get_cache

HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture
def client(db_session):
    cache = TTLCache(300)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def weekly_goal_payload(**overrides):
    payload = {
        "title": "Weekly report",
        "scope": "individual",
        "sector": "TI",
        "assigned_user_id": "alice",
        "goal_type": "task_completion",
        "period": "weekly",
        "has_monetary_reward": True,
        "monetary_value": 7000,
    }
    payload.update(overrides)
    return payload


class TestHealthAndAuth:

    def test_root_is_public(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_missing_key_rejected(self, client):
        assert client.get("/api/goals").status_code == 401

    def test_wrong_key_rejected(self, client):
        assert client.get("/api/goals", headers={"X-API-Key": "nope"}).status_code == 401


class TestProfiles:

    def test_create_and_fetch(self, client):
        response = client.post("/api/profiles", json={"user_id": "alice", "sector": "TI"}, headers=HEADERS)
        assert response.status_code == 201
        assert response.json()["role"] == "collaborator"

        response = client.get("/api/profiles/alice", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["sector"] == "TI"

    def test_duplicate_profile(self, client):
        client.post("/api/profiles", json={"user_id": "alice", "sector": "TI"}, headers=HEADERS)
        response = client.post("/api/profiles", json={"user_id": "alice", "sector": "TI"}, headers=HEADERS)
        assert response.status_code == 400

    def test_unknown_profile(self, client):
        assert client.get("/api/profiles/ghost", headers=HEADERS).status_code == 404

    def test_list_by_sector(self, client):
        client.post("/api/profiles", json={"user_id": "alice", "sector": "TI"}, headers=HEADERS)
        client.post("/api/profiles", json={"user_id": "bob", "sector": "RH"}, headers=HEADERS)

        response = client.get("/api/profiles", params={"sector": "TI"}, headers=HEADERS)
        assert [p["user_id"] for p in response.json()] == ["alice"]

        response = client.get("/api/profiles", params={"sector": "all"}, headers=HEADERS)
        assert len(response.json()) == 2


class TestGoals:

    def test_create_goal(self, client):
        response = client.post("/api/goals", json=weekly_goal_payload(), headers=HEADERS)
        assert response.status_code == 201
        body = response.json()
        assert body["monetary_value"] == 7000
        assert body["is_active"] is True

    def test_invalid_period(self, client):
        response = client.post("/api/goals", json=weekly_goal_payload(period="hourly"), headers=HEADERS)
        assert response.status_code == 422

    def test_individual_goal_needs_assignee(self, client):
        response = client.post(
            "/api/goals", json=weekly_goal_payload(assigned_user_id=None), headers=HEADERS
        )
        assert response.status_code == 422

    def test_missing_goal(self, client):
        assert client.get("/api/goals/999", headers=HEADERS).status_code == 404
        assert client.put("/api/goals/999", json={"is_active": False}, headers=HEADERS).status_code == 404

    def test_deactivate_goal(self, client):
        goal_id = client.post("/api/goals", json=weekly_goal_payload(), headers=HEADERS).json()["id"]

        response = client.put(f"/api/goals/{goal_id}", json={"is_active": False}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        active = client.get("/api/goals", headers=HEADERS).json()
        assert active == []

    def test_goal_period(self, client):
        goal_id = client.post("/api/goals", json=weekly_goal_payload(), headers=HEADERS).json()["id"]

        response = client.get(f"/api/goals/{goal_id}/period", headers=HEADERS)
        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "weekly"
        assert 1 <= body["days_in_period"] <= 7
        assert body["is_active"] is True


class TestSubmissionsAndRewards:

    def test_submission_then_duplicate(self, client):
        payload = {"user_id": "alice", "checklist": {"1": True}}

        assert client.post("/api/submissions", json=payload, headers=HEADERS).status_code == 201
        assert client.post("/api/submissions", json=payload, headers=HEADERS).status_code == 409

        history = client.get("/api/submissions", params={"user_id": "alice"}, headers=HEADERS).json()
        assert len(history) == 1

    def test_rewards_after_submission(self, client):
        client.post("/api/profiles", json={"user_id": "alice", "sector": "TI"}, headers=HEADERS)
        goal_id = client.post("/api/goals", json=weekly_goal_payload(), headers=HEADERS).json()["id"]

        before = client.get("/api/rewards/alice", headers=HEADERS).json()
        assert before["total_earned_this_week"] == 0
        assert before["total_available_rewards"] == 7000

        client.post(
            "/api/submissions",
            json={"user_id": "alice", "checklist": {str(goal_id): True}},
            headers=HEADERS
        )

        after = client.get("/api/rewards/alice", headers=HEADERS).json()
        assert after["total_earned_this_week"] == 7000
        assert after["rewards_by_period"][0]["is_earned"] is True

        sector = client.get("/api/rewards/sector/TI", headers=HEADERS).json()
        assert sector["collaborator_count"] == 1
        assert sector["total_earned_this_week"] == 7000

    def test_monthly_earnings_month_format(self, client):
        response = client.get("/api/rewards/alice/monthly", params={"month": "2024-01"}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json() == {"user_id": "alice", "month": "2024-01", "total_earned": 0}

        response = client.get("/api/rewards/alice/monthly", params={"month": "2024-13"}, headers=HEADERS)
        assert response.status_code == 422
