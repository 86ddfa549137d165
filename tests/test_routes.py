"""
API tests for the planning endpoints.

Requests go through the full FastAPI stack with the fixed test clock.
"""

import pytest

from tests.factories import FIXED_NOW, ItemSnapshotFactory


# ===================
# HEALTH
# ===================

class TestHealth:

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_lists_endpoints(self, test_client):
        response = test_client.get("/")

        assert response.json()["endpoints"]["count_plan"] == "/api/count-plan"


# ===================
# COUNT PLAN
# ===================

class TestCountPlanRoutes:

    def test_build_plan(self, test_client):
        payload = {
            "items": [
                ItemSnapshotFactory.create(days_since_count=30, loose_units=0, average_daily_usage="20", lead_time_days=14),
                ItemSnapshotFactory.create(),
            ],
            "events": [
                {"item_id": "item-001", "type": "count_correction", "delta_units": -3,
                 "created_at": FIXED_NOW.isoformat()},
            ],
            "mode": "Express",
            "now": FIXED_NOW.isoformat(),
        }

        response = test_client.post("/api/count-plan", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "express"
        assert data["target_duration_minutes"] == 15
        assert len(data["candidates"]) == 1
        assert data["candidates"][0]["id"] == "item-001"
        assert data["candidates"][0]["band"] == "critical"
        assert data["summary"]["critical_count"] == 1
        assert data["summary"]["recommended_zone_label"] == "Aisle 1"

    def test_include_routine(self, test_client):
        payload = {
            "items": [ItemSnapshotFactory.create()],
            "include_routine": True,
            "now": FIXED_NOW.isoformat(),
        }

        response = test_client.post("/api/count-plan", json=payload)

        data = response.json()
        assert data["candidates"][0]["is_routine"] is True
        assert data["summary"]["routine_count"] == 1

    def test_invalid_mode(self, test_client):
        response = test_client.post("/api/count-plan", json={"items": [], "mode": "turbo"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_PLAN_MODE"

    def test_list_modes(self, test_client):
        response = test_client.get("/api/count-plan/modes")

        modes = {m["mode"]: m for m in response.json()}
        assert set(modes) == {"express", "balanced", "deep", "shrink_focus", "fast_mover"}
        assert modes["deep"]["item_limit"] == 40
        assert modes["shrink_focus"]["title"] == "Shrink Focus"

    def test_normalize(self, test_client):
        payload = {"cases": 2, "units_per_case": 12, "units": 15, "eaches_per_unit": 6, "eaches": 8}

        response = test_client.post("/api/count-plan/normalize", json=payload)

        assert response.json() == {"cases": 3, "units_per_case": 12, "units": 4, "eaches_per_unit": 6, "eaches": 2}


# ===================
# REPLENISHMENT
# ===================

@pytest.fixture
def order_items():
    return [
        ItemSnapshotFactory.create(loose_units=0, average_daily_usage="5", lead_time_days=10,
                                   preferred_supplier="Acme", reorder_case_pack=12),
        ItemSnapshotFactory.create(loose_units=8, average_daily_usage="1", lead_time_days=10),
        ItemSnapshotFactory.create(loose_units=100, average_daily_usage="1", lead_time_days=10),
    ]


class TestReplenishmentRoutes:

    def test_signals(self, test_client, order_items):
        response = test_client.post("/api/replenishment/signals", json={"items": order_items})

        assert response.status_code == 200
        statuses = [s["status"] for s in response.json()]
        assert statuses == ["URGENT", "DUE_SOON", "HEALTHY"]

    def test_suggestions(self, test_client, order_items):
        response = test_client.post("/api/replenishment/suggestions", json={"items": order_items})

        assert response.status_code == 200
        assert response.json()[0]["item_id"] == "item-001"

    def test_drafts_require_permission(self, test_client, order_items):
        response = test_client.post("/api/replenishment/drafts", json={"items": order_items})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PURCHASING_NOT_PERMITTED"

    def test_drafts_grouped_by_supplier(self, test_client, order_items):
        payload = {
            "items": order_items,
            "can_manage_purchasing": True,
            "notes": "Weekly run.",
            "now": FIXED_NOW.isoformat(),
        }

        response = test_client.post("/api/replenishment/drafts", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["draft_count"] == 2
        assert data["total_items"] == 2
        assert data["total_units"] == 60 + 2
        assert data["total_open_units"] == 62
        acme, unassigned = data["drafts"]
        assert acme["supplier_label"] == "Acme"
        assert acme["reference"] == "PO-1001"
        assert acme["notes"] == "Supplier batch: Acme. Weekly run. Generated from Replenishment Planner."
        assert unassigned["supplier_label"] == "Unassigned Supplier"

    def test_drafts_with_nothing_to_order(self, test_client):
        payload = {
            "items": [ItemSnapshotFactory.create(loose_units=100, average_daily_usage="1", lead_time_days=10)],
            "can_manage_purchasing": True,
        }

        response = test_client.post("/api/replenishment/drafts", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "NO_ACTIONABLE_LINES"
