"""
core/pagination.py -- Offset pagination over SQLAlchemy Core tables.

Every list endpoint in the API pages the same way: page/limit query params, a
whitelisted sort key, and a {currentPage, totalPages, ...} block in the
response. Stores call fetch_page(); the route layer turns the PageResult into
the response envelope.

Security: sort keys come from a per-table whitelist. A caller-supplied sortBy
never reaches SQL as a column name.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from sqlalchemy import Table, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import ColumnElement

T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def order_clause(
    table: Table,
    sort_by: Optional[str],
    sort_order: str,
    allowed: dict[str, str],
    default: str = "createdAt",
) -> ColumnElement:
    """Map an API sort key (camelCase) to a column ordering.

    Unknown keys fall back to default rather than erroring. The
    frontend sends sortBy values for fields that only some entities have.
    """
    column_name = allowed.get(sort_by or default, allowed[default])
    column = table.c[column_name]
    return column.desc() if sort_order == "desc" else column.asc()


def contains_any(term: str, *columns) -> ColumnElement:
    """Case-insensitive substring match of term against any of columns.

    % and _ in term match literally.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(*[c.ilike(pattern, escape="\\") for c in columns])


def fetch_page(
    engine: Engine,
    table: Table,
    mapper: Callable[[Any], T],
    *,
    page: int,
    limit: int,
    where: Optional[ColumnElement] = None,
    order_by: Optional[ColumnElement] = None,
) -> PageResult[T]:
    """Run the page query and the matching COUNT(*) and map rows with mapper."""
    stmt = select(table)
    count_stmt = select(func.count()).select_from(table)
    if where is not None:
        stmt = stmt.where(where)
        count_stmt = count_stmt.where(where)
    if order_by is not None:
        # id as tiebreaker keeps pages stable when many rows share a timestamp
        stmt = stmt.order_by(order_by, table.c.id.desc())
    stmt = stmt.offset((page - 1) * limit).limit(limit)
    with engine.connect() as conn:
        rows = conn.execute(stmt).fetchall()
        total = conn.execute(count_stmt).scalar() or 0
    return PageResult(items=[mapper(r) for r in rows], total=total, page=page, limit=limit)
