"""
Generic data-access gateway.

A uniform ``insert / select / update / delete`` surface over the tables
declared in :mod:`loja.models`, mirroring the query builder of the hosted
database client: filters, single-column ordering and 1-indexed pagination.

Database errors are logged and re-raised unchanged. Each mutation commits on
its own unless it runs inside :meth:`DataGateway.transaction`, in which case
everything inside the block commits or rolls back together.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import sqlalchemy as sa
from sqlalchemy import MetaData, Table, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import loja.models  # noqa: F401  registers every table on Base.metadata
from loja.db.base import Base

logger = logging.getLogger(__name__)

_COMPARATORS = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page < 1 or self.page_size < 1:
            raise ValueError("page and page_size must be >= 1")

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        """Inclusive index of the last row of the page."""
        return self.page * self.page_size - 1


def escape_like(value: Any) -> str:
    return str(value).replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")


def build_conditions(table: Table, filters: Mapping[str, Any] | None) -> list[Any]:
    """Translate a filter map into SQLAlchemy WHERE clauses.

    - ``None`` values are skipped
    - scalars mean equality
    - lists / tuples / sets mean ``IN``
    - dicts hold ``gt``, ``gte``, ``lt``, ``lte`` or ``like`` (substring match)
    """
    conditions: list[Any] = []
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if key not in table.c:
            raise ValueError(f"Unknown column '{key}' for table '{table.name}'")
        column = table.c[key]

        if isinstance(value, (list, tuple, set, frozenset)):
            conditions.append(column.in_(list(value)))
        elif isinstance(value, Mapping):
            for op, operand in value.items():
                if op == "like":
                    conditions.append(column.like(f"%{escape_like(operand)}%", escape="\\"))
                elif op in _COMPARATORS:
                    conditions.append(_COMPARATORS[op](column, operand))
                else:
                    raise ValueError(f"Unsupported filter operator '{op}'")
        else:
            conditions.append(column == value)
    return conditions


class DataGateway:
    """Per-request data access bound to one ``AsyncSession``."""

    def __init__(self, session: AsyncSession, metadata: MetaData = Base.metadata) -> None:
        self.session = session
        self.metadata = metadata
        self._in_transaction = False

    # ── Helpers ─────────────────────────────────────────────────────
    def _table(self, name: str) -> Table:
        try:
            return self.metadata.tables[name]
        except KeyError:
            raise ValueError(f"Unknown table '{name}'") from None

    @staticmethod
    def _columns(table: Table, columns: str | list[str]) -> list[Any]:
        if isinstance(columns, str):
            columns = [c.strip() for c in columns.split(",") if c.strip()]
        if not columns or columns == ["*"]:
            return list(table.c)
        return [table.c[name] for name in columns]

    async def _fail(self, action: str, table: str, exc: SQLAlchemyError) -> None:
        logger.error("Erro ao %s na tabela %s: %s", action, table, exc)
        if not self._in_transaction:
            await self.session.rollback()

    async def _commit(self) -> None:
        if not self._in_transaction:
            await self.session.commit()

    # ── Operations ──────────────────────────────────────────────────
    async def insert(self, table: str, record: Mapping[str, Any]) -> list[dict[str, Any]]:
        tbl = self._table(table)
        stmt = sa.insert(tbl).values(**record).returning(*tbl.c)
        try:
            result = await self.session.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
            await self._commit()
        except SQLAlchemyError as exc:
            await self._fail("inserir dados", table, exc)
            raise
        return rows

    async def select(
        self,
        table: str,
        columns: str | list[str] = "*",
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        pagination: Pagination | None = None,
    ) -> dict[str, Any]:
        """Return ``{"data": [...], "count": total_matching_rows}``."""
        tbl = self._table(table)
        conditions = build_conditions(tbl, filters)

        query = sa.select(*self._columns(tbl, columns)).where(*conditions)
        count_query = sa.select(func.count()).select_from(tbl).where(*conditions)

        if order is not None:
            column = tbl.c[order.column]
            query = query.order_by(column.asc() if order.ascending else column.desc())
        if pagination is not None:
            query = query.offset(pagination.start).limit(pagination.page_size)

        try:
            count = (await self.session.execute(count_query)).scalar_one()
            result = await self.session.execute(query)
            data = [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as exc:
            await self._fail("selecionar dados", table, exc)
            raise
        return {"data": data, "count": count}

    async def get(self, table: str, record_id: Any, columns: str | list[str] = "*") -> dict[str, Any] | None:
        result = await self.select(table, columns, filters={"id": record_id})
        return result["data"][0] if result["data"] else None

    async def update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> list[dict[str, Any]]:
        tbl = self._table(table)
        stmt = sa.update(tbl).where(tbl.c.id == record_id).values(**patch).returning(*tbl.c)
        try:
            result = await self.session.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
            await self._commit()
        except SQLAlchemyError as exc:
            await self._fail("atualizar dados", table, exc)
            raise
        return rows

    async def delete(self, table: str, record_id: Any) -> list[dict[str, Any]]:
        tbl = self._table(table)
        stmt = sa.delete(tbl).where(tbl.c.id == record_id).returning(*tbl.c)
        try:
            result = await self.session.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
            await self._commit()
        except SQLAlchemyError as exc:
            await self._fail("deletar dados", table, exc)
            raise
        return rows

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DataGateway]:
        """Run several operations atomically on the database transaction."""
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            await self.session.commit()
        except Exception:
            logger.exception("Transação revertida")
            await self.session.rollback()
            raise
        finally:
            self._in_transaction = False
