"""
Shared test fixtures.

Every test uses the fixed clock in tests.factories.FIXED_NOW so plans
are reproducible.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from datetime import datetime

from tests.factories import (
    FIXED_NOW,
    ItemSnapshotFactory,
    CorrectionEventFactory,
    CountPlanInputFactory,
)


# ===================
# CLOCK
# ===================

@pytest.fixture
def now() -> datetime:
    """Fixed planning clock."""
    return FIXED_NOW


# ===================
# FACTORY RESET
# ===================

@pytest.fixture(autouse=True)
def reset_factories():
    """Keep generated names stable per test."""
    ItemSnapshotFactory.reset_counter()
    CorrectionEventFactory.reset_counter()
    CountPlanInputFactory.reset_counter()
    yield


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def sample_item_data() -> dict:
    """A cased, barcoded item counted today."""
    return {
        "id": "item-001",
        "name": "Nitrile Gloves L",
        "location": "Aisle 3",
        "category": "Safety",
        "cases": 2,
        "units_per_case": 10,
        "loose_units": 4,
        "eaches_per_unit": 100,
        "loose_eaches": 0,
        "average_daily_usage": "3",
        "lead_time_days": 7,
        "safety_stock_units": 5,
        "preferred_supplier": "Acme Supply",
        "supplier_sku": "ACM-GLV-L",
        "barcode": "0123456789012",
        "last_updated_at": FIXED_NOW.isoformat(),
    }


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
