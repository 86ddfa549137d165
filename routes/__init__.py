"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.count_plan import router as count_plan_router
from routes.replenishment import router as replenishment_router

__all__ = [
    "count_plan_router",
    "replenishment_router",
]
