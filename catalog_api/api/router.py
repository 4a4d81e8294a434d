"""
==============================================================================
Main API Router
==============================================================================

Combines all v1 API routes under /api/v1 prefix.

==============================================================================
"""

from fastapi import APIRouter

from catalog_api.api.v1 import health, products


class MainAPIRouter:
    """
    Main API router combining all versioned routes.
    """

    def __init__(self):
        self._router = APIRouter(prefix="/api/v1")
        self._include_routers()

    def _include_routers(self) -> None:
        """Include all v1 routers."""
        self._router.include_router(health.router)
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


api_router = MainAPIRouter().router
