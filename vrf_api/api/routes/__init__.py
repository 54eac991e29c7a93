from __future__ import annotations

from vrf_api.api.routes.health import router as health_router
from vrf_api.api.routes.vrf import router as vrf_router

__all__ = ["health_router", "vrf_router"]
