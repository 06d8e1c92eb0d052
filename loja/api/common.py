"""
Helpers shared by the resource endpoints: existence / uniqueness checks and
the paginated list envelope.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from loja.core.exceptions import ConflictError, NotFoundError
from loja.db.gateway import DataGateway
from loja.schemas.common import PaginationMeta


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def get_or_404(gateway: DataGateway, table: str, record_id: str, message: str) -> dict[str, Any]:
    row = await gateway.get(table, record_id)
    if row is None:
        raise NotFoundError(message)
    return row


async def ensure_unique(gateway: DataGateway, table: str, field: str, value: Any, message: str) -> None:
    """Raise 409 when any row already holds *value* in *field*."""
    if value is None or value == "":
        return
    existing = await gateway.select(table, "id", filters={field: value})
    if existing["data"]:
        raise ConflictError(message)


def build_filters(
    params: Mapping[str, str | None],
    like: Iterable[str] = (),
    exact: Iterable[str] = (),
) -> dict[str, Any]:
    """Keep only non-empty query params: substring match for *like*, equality for *exact*."""
    filters: dict[str, Any] = {}
    for field in like:
        if params.get(field):
            filters[field] = {"like": params[field]}
    for field in exact:
        if params.get(field):
            filters[field] = params[field]
    return filters


def page_envelope(result: Mapping[str, Any], page: int, page_size: int) -> dict[str, Any]:
    total = result["count"] or 0
    return {
        "success": True,
        "count": total,
        "data": result["data"],
        "pagination": PaginationMeta.build(page, page_size, total),
    }
