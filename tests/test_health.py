from fastapi.testclient import TestClient

from reminder_service.main import app

client = TestClient(app)


def test_health_check_returns_ok_status_and_version() -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["status"] == "ok"
    assert "version" in payload["data"]
    assert payload["data"]["version"]


def test_reminder_routes_reject_missing_token() -> None:
    response = client.get("/api/reminder", params={"type": "all"})

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid or missing token"


def test_reminder_routes_reject_unknown_token() -> None:
    response = client.patch(
        "/api/reminder/done/1", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 403
    assert response.json()["details"] == [{"message": "Invalid or missing token"}]
