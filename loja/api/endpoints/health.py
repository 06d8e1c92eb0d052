"""Public liveness probe."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from loja.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())
