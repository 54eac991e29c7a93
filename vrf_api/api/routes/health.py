from __future__ import annotations

from fastapi import APIRouter

from vrf_api.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Does not contact the chain node, so it stays green while the upstream
    is down; the chain tag tells operators which network the instance serves.
    """

    return {"status": "ok", "chain": settings.chain.chain_name}
