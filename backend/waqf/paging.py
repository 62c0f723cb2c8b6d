import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar('T')


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


def paginate(query, page: int = 1, limit: int = 10) -> dict:
    """Slice a query into one page plus the meta block the frontend expects."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "data": items,
        "meta": PageMeta(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit)),
    }


def contains_pattern(term: str) -> str:
    """LIKE pattern matching ``term`` literally anywhere, for use with a backslash escape."""
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"
