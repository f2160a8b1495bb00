# This file defines the liveness endpoint.
# It always answers 200 so load balancers can tell the process is serving requests.

from __future__ import annotations

from fastapi import APIRouter

from protection_relay.api.schemas.protection_schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> dict[str, object]:
    return {"ok": True}
