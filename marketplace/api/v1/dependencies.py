from typing import Generator, List, Optional

from fastapi import Depends, Path, Query
from sqlalchemy.orm import Session

from marketplace.core.constants import ALL_CATEGORIES
from marketplace.db.session import get_db
from marketplace.domain.exceptions import InvalidCategoryId
from marketplace.domain.unit_of_work import UnitOfWork
from marketplace.utils.object_id import is_valid_object_id


__all__ = ["get_db", "get_uow", "valid_category_id", "category_filter_params"]


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    """Get a Unit of Work instance for dependency injection."""
    return UnitOfWork(db)


def valid_category_id(category_id: str = Path(...)) -> str:
    """Reject malformed ids before any store call."""
    if not is_valid_object_id(category_id):
        raise InvalidCategoryId()
    return category_id


class CategoryFilterParams:
    def __init__(
        self,
        category_id: Optional[str],
        subcategory_ids: List[str],
        offset: int,
        limit: int,
    ):
        self.category_id = category_id
        self.subcategory_ids = subcategory_ids
        self.offset = offset
        self.limit = limit


def category_filter_params(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    subcategory_ids: Optional[str] = Query(None, alias="subcategoryIds"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> CategoryFilterParams:
    """Parse ``categoryId`` and comma-separated ``subcategoryIds``."""
    if category_id and category_id != ALL_CATEGORIES and not is_valid_object_id(category_id):
        raise InvalidCategoryId("categoryId")
    ids = [sid.strip() for sid in (subcategory_ids or "").split(",") if sid.strip()]
    for sid in ids:
        if not is_valid_object_id(sid):
            raise InvalidCategoryId("subcategoryIds")
    return CategoryFilterParams(category_id, ids, offset, limit)
