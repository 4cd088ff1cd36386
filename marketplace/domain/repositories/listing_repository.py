from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from sqlalchemy.orm import Session, selectinload

from marketplace.domain.repositories.base_sqlalchemy import SQLAlchemyRepository
from marketplace.models.listing_model import Listing, ListingItem

if TYPE_CHECKING:
    from marketplace.domain.filters import CategoryFilter


class ListingRepository(SQLAlchemyRepository[Listing, str]):
    def __init__(self, db: Session):
        super().__init__(Listing, db)

    def search(
        self,
        category_filter: "CategoryFilter",
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[Listing]:
        query = (
            self.db.query(Listing)
            .options(selectinload(Listing.items).selectinload(ListingItem.categories))
            .filter(Listing.is_active.is_(True))
        )
        if not category_filter.is_unrestricted:
            query = query.filter(category_filter.clause())
        return (
            query.order_by(Listing.created_at.desc(), Listing.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
