"""
Integration tests for the leaderboard HTTP endpoints.

The activities feed is replaced through FastAPI dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from src.activities.exceptions import ActivitiesApiError
from src.dependencies import get_activities_client
from src.main import app
from tests.conftest import make_record


class FakeActivitiesClient:
    """Stands in for ActivitiesClient with canned payloads."""

    def __init__(self, activities=None, groups=None, error=None):
        self.activities = activities or []
        self.groups = groups or []
        self.error = error

    async def fetch_activities(self):
        if self.error:
            raise self.error
        return self.activities

    async def fetch_weekly_challenge(self, period):
        if self.error:
            raise self.error
        return self.groups


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _use_feed(fake: FakeActivitiesClient) -> None:
    app.dependency_overrides[get_activities_client] = lambda: fake


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestComputeEndpoint:
    """Test ranking of caller-supplied records."""

    def test_compute_capped(self, client):
        records = [make_record(distance=4000, date="2025-09-01") for _ in range(3)]
        response = client.post("/leaderboard/compute", json=records)

        assert response.status_code == 200
        body = response.json()
        athlete = body["athletes"][0]
        assert athlete["rank"] == 1
        assert athlete["name"] == "Ana Lee"
        assert athlete["total_distance"] == 12000
        assert athlete["capped_distance"] == 10000
        assert body["teams"][0]["name"] == "Ducks"
        assert body["summary"]["total_activities"] == 3

    def test_compute_raw_metric(self, client):
        records = [
            make_record("Ana", "Lee", distance=15000),
            make_record("Bo", "Kim", distance=11000, date="2025-09-02"),
        ]
        response = client.post("/leaderboard/compute?metric=raw", json=records)
        assert response.json()["metric"] == "raw"
        assert [a["name"] for a in response.json()["athletes"]] == ["Ana Lee", "Bo Kim"]

    def test_non_list_body_is_rejected(self, client):
        response = client.post("/leaderboard/compute", json={"distance": 10})
        assert response.status_code == 422
        assert "Expected a list" in response.json()["detail"]

    def test_unknown_metric_is_rejected(self, client):
        response = client.post("/leaderboard/compute?metric=points", json=[])
        assert response.status_code == 422


class TestMembersEndpoint:
    def test_roster_members_always_listed(self, client):
        payload = {
            "roster": [
                {"firstname": "Ana", "lastname": "Lee", "team": "Ducks"},
                {"firstname": "Bo", "lastname": "Kim", "team": "Gooses"},
            ],
            "activities": [make_record("Ana", "Lee", distance=2000)],
        }
        response = client.post("/leaderboard/members", json=payload)

        assert response.status_code == 200
        names = [(m["rank"], m["name"], m["activity_count"]) for m in response.json()]
        assert names == [(1, "Ana Lee", 1), (2, "Bo Kim", 0)]

    def test_invalid_roster(self, client):
        response = client.post(
            "/leaderboard/members", json={"roster": "nobody", "activities": []}
        )
        assert response.status_code == 422
        assert "roster members" in response.json()["detail"]

    def test_missing_activities_key(self, client):
        response = client.post(
            "/leaderboard/members", json={"roster": [{"firstname": "Ana"}]}
        )
        assert response.status_code == 422

    def test_non_record_elements_are_skipped(self, client):
        payload = {
            "roster": [{"firstname": "Ana", "lastname": "Lee"}, "stray"],
            "activities": [make_record("Ana", "Lee", distance=1500), 7],
        }
        response = client.post("/leaderboard/members", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert [m["name"] for m in body] == ["Ana Lee"]
        assert body[0]["total_distance"] == 1500


class TestFeedEndpoints:
    """Test endpoints backed by the activities feed."""

    def test_leaderboards_from_feed(self, client):
        _use_feed(
            FakeActivitiesClient(
                activities=[
                    make_record("Ana", "Lee", "Ducks", 9000, "2025-09-01"),
                    make_record("Bo", "Kim", "Ducks", 9000, "2025-09-01"),
                ]
            )
        )
        response = client.get("/leaderboard")

        assert response.status_code == 200
        team = response.json()["teams"][0]
        assert team["capped_distance"] == 18000
        assert team["member_count"] == 2

    def test_athletes_for_weekly_period(self, client):
        _use_feed(
            FakeActivitiesClient(
                groups=[
                    {
                        "athlete_name": "Ana Lee",
                        "team": "Ducks",
                        "activities": [{"distance": 12000, "date": "2025-09-08"}],
                    }
                ]
            )
        )
        response = client.get("/leaderboard/athletes?period=secondWeek")

        assert response.status_code == 200
        assert response.json()[0]["capped_distance"] == 10000

    def test_teams_endpoint(self, client):
        _use_feed(FakeActivitiesClient(activities=[make_record(team=None)]))
        response = client.get("/leaderboard/teams")
        assert response.json()[0]["name"] == "No Team"

    def test_feed_failure_is_bad_gateway(self, client):
        _use_feed(FakeActivitiesClient(error=ActivitiesApiError("down")))
        response = client.get("/leaderboard")
        assert response.status_code == 502

    def test_unusable_feed_payload_is_bad_gateway(self, client):
        _use_feed(FakeActivitiesClient(activities={"error": "oops"}))
        response = client.get("/leaderboard")
        assert response.status_code == 502
