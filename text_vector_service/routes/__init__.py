"""
API Routes module.

FastAPI route handlers organized by resource:
- system: documentation, health and backend reachability
- texts: add/query text endpoints (embedding + index)
- indexes: index management pass-through
"""

from .indexes import router as indexes_router
from .system import router as system_router
from .texts import router as texts_router

__all__ = [
    "indexes_router",
    "system_router",
    "texts_router",
]
