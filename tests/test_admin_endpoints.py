"""Tests for admin endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from health_tracker.api.app import create_app

HEADERS = {"X-Admin-Token": "admin-token"}


def test_admin_requires_token(container) -> None:
    with TestClient(create_app(container)) as client:
        missing = client.get("/admin/health")
        wrong = client.get("/admin/health", headers={"X-Admin-Token": "nope"})
        ok = client.get("/admin/health", headers=HEADERS)

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert ok.json() == {"status": "ok"}


def test_admin_sync_reports_observer_state(container) -> None:
    container.updates_observer.anchor = "anchor-7"
    container.updates_observer.update_count = 12

    with TestClient(create_app(container)) as client:
        response = client.get("/admin/sync", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {
        "observing": False,
        "anchor": "anchor-7",
        "update_count": 12,
        "last_synced_at": None,
        "pending_refreshes": 0,
    }


def test_admin_metrics_lists_cached_rows_oldest_first(
    container, metric_store
) -> None:
    current = datetime.now(tz=UTC).date()
    metric_store.seed(current, steps=900)
    metric_store.seed(current - timedelta(days=2), steps=300)
    metric_store.seed(current - timedelta(days=10), steps=100)

    with TestClient(create_app(container)) as client:
        response = client.get("/admin/metrics?days=3", headers=HEADERS)
        too_many = client.get("/admin/metrics?days=90", headers=HEADERS)

    assert response.status_code == 200
    assert [row["steps"] for row in response.json()["metrics"]] == [300, 900]
    assert too_many.status_code == 422
