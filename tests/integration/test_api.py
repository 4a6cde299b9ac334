from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from egg_tracker.api.app import create_app
from egg_tracker.core.config import TrackerConfig
from egg_tracker.core.container import DIContainer
from egg_tracker.core.tracker import EggTracker
from egg_tracker.domain.exceptions import StorageUnavailable

TODAY = date(2024, 1, 20)


@pytest.fixture
def tracker(tmp_path) -> EggTracker:
    return DIContainer.create_tracker(
        config=TrackerConfig(),
        db_path=tmp_path / "eggs.db",
        clock=lambda: TODAY,
    )


@pytest.fixture
def client(tracker: EggTracker) -> TestClient:
    return TestClient(create_app(tracker))


def _create_chicken(client: TestClient, name: str = "Henrietta") -> int:
    response = client.post("/chickens", json={"name": name, "breed": "Leghorn"})
    assert response.status_code == 201
    return response.json()["id"]


def _lay(client: TestClient, chicken_id: int, day: date, quantity: int) -> dict:
    response = client.post(
        "/egg-records",
        json={"chicken_id": chicken_id, "date": day.isoformat(), "quantity": quantity},
    )
    assert response.status_code == 201
    return response.json()


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_chicken_lifecycle(client: TestClient):
    chicken_id = _create_chicken(client)

    updated = client.patch(f"/chickens/{chicken_id}", json={"name": "Hetty"})
    assert updated.status_code == 200
    assert updated.json()["name"] == "Hetty"
    assert updated.json()["breed"] == "Leghorn"

    assert [c["name"] for c in client.get("/chickens").json()] == ["Hetty"]
    assert client.delete(f"/chickens/{chicken_id}").json() == {"success": True}
    assert client.delete(f"/chickens/{chicken_id}").json() == {"success": False}


def test_create_chicken_rejects_blank_name(client: TestClient):
    response = client.post("/chickens", json={"name": "", "breed": "Leghorn"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["detail"][0]["loc"] == ["body", "name"]


def test_update_unknown_chicken_is_404(client: TestClient):
    response = client.patch("/chickens/999", json={"name": "Ghost"})
    assert response.status_code == 404
    assert response.json()["error"] == "ChickenNotFound"


def test_egg_record_crud(client: TestClient):
    chicken_id = _create_chicken(client)
    record = _lay(client, chicken_id, TODAY, 2)
    assert record["date"] == TODAY.isoformat()

    patched = client.patch(f"/egg-records/{record['id']}", json={"quantity": 4})
    assert patched.json()["quantity"] == 4

    listed = client.get(f"/chickens/{chicken_id}/egg-records").json()
    assert [r["quantity"] for r in listed] == [4]

    assert client.delete(f"/egg-records/{record['id']}").json() == {"success": True}
    assert client.get("/egg-records").json() == []


def test_egg_record_validation_errors(client: TestClient):
    chicken_id = _create_chicken(client)

    bad_date = client.post(
        "/egg-records", json={"chicken_id": chicken_id, "date": "01/15/2024", "quantity": 1}
    )
    negative = client.post(
        "/egg-records", json={"chicken_id": chicken_id, "date": "2024-01-15", "quantity": -1}
    )
    missing_chicken = client.post(
        "/egg-records", json={"chicken_id": 999, "date": "2024-01-15", "quantity": 1}
    )

    assert bad_date.status_code == 422
    assert bad_date.json()["error"] == "InvalidDateFormat"
    assert negative.status_code == 422
    assert negative.json()["error"] == "ValidationError"
    assert missing_chicken.status_code == 404


def test_list_egg_records_by_range(client: TestClient):
    chicken_id = _create_chicken(client)
    for days_ago in (0, 2, 5):
        _lay(client, chicken_id, TODAY - timedelta(days=days_ago), 1)

    response = client.get(
        "/egg-records",
        params={"start_date": (TODAY - timedelta(days=2)).isoformat()},
    )

    assert len(response.json()) == 2


def test_daily_summary_endpoint(client: TestClient):
    ids = [_create_chicken(client, name) for name in ("A", "B", "C")]
    for chicken_id, quantity in zip(ids, (2, 1, 3)):
        _lay(client, chicken_id, date(2024, 1, 15), quantity)

    response = client.get("/summaries/daily/2024-01-15")

    assert response.json() == {"date": "2024-01-15", "total_eggs": 6, "chickens_laid": 3}


def test_daily_summary_for_quiet_day_is_zero(client: TestClient):
    response = client.get("/summaries/daily/2024-01-16")
    assert response.status_code == 200
    assert response.json() == {"date": "2024-01-16", "total_eggs": 0, "chickens_laid": 0}


def test_daily_summary_rejects_malformed_date(client: TestClient):
    assert client.get("/summaries/daily/2024-1-5").status_code == 422


def test_recent_summaries_endpoint(client: TestClient):
    chicken_id = _create_chicken(client)
    _lay(client, chicken_id, TODAY, 1)
    _lay(client, chicken_id, TODAY - timedelta(days=1), 2)
    _lay(client, chicken_id, TODAY - timedelta(days=10), 3)

    response = client.get("/summaries/recent", params={"days": 7})

    assert [s["date"] for s in response.json()] == [
        TODAY.isoformat(),
        (TODAY - timedelta(days=1)).isoformat(),
    ]
    assert len(client.get("/summaries/recent").json()) == 2


@pytest.mark.parametrize("days", [0, -2, 31])
def test_recent_summaries_rejects_bad_window(client: TestClient, days):
    response = client.get("/summaries/recent", params={"days": days})
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidWindowSize"


def test_recent_summaries_rejects_non_integer_window(client: TestClient):
    response = client.get("/summaries/recent", params={"days": "abc"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["detail"][0]["loc"] == ["query", "days"]


def test_storage_failure_maps_to_503(tracker: EggTracker, monkeypatch):
    def unavailable(*_args, **_kwargs):
        raise StorageUnavailable(context={"operation": "fetch_by_date"})

    monkeypatch.setattr(tracker, "get_daily_summary", unavailable)
    client = TestClient(create_app(tracker))

    response = client.get("/summaries/daily/2024-01-15")

    assert response.status_code == 503
    assert response.json()["error"] == "StorageUnavailable"
