"""
Pagination Utility Module

Page/limit pagination helpers for list endpoints.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Pagination block returned next to the items.

    ``pages`` is the number of pages needed for ``total`` items (0 when empty).
    """
    pages = (total + limit - 1) // limit if total > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
        "has_next": page < pages,
        "has_previous": page > 1,
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    limit: int = 10,
    count_query: Optional[Select] = None
) -> Dict[str, Any]:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query (already ordered)
        page: Page number (1-indexed)
        limit: Items per page
        count_query: Optional custom count query

    Returns:
        Dictionary with ``items`` (ORM objects) and ``pagination``
    """
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))

    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))

    return {
        "items": list(result.scalars().all()),
        "pagination": pagination_meta(page, limit, total),
    }
