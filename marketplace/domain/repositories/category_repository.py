from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from marketplace.domain.repositories.base_sqlalchemy import SQLAlchemyRepository
from marketplace.models.category_model import Category
from marketplace.models.listing_model import Listing, listing_item_categories


# parent_id=None is a real filter (roots), so "not given" needs its own marker
UNSET = object()


class CategoryRepository(SQLAlchemyRepository[Category, str]):
    def __init__(self, db: Session):
        super().__init__(Category, db)

    # ----- filtering ---------------------------------------------------
    def _filtered(
        self,
        *,
        parent_id=UNSET,
        parent_ids: Optional[Iterable[str]] = None,
        is_active: Optional[bool] = None,
    ) -> Query:
        query = self.db.query(Category)
        if parent_id is not UNSET:
            if parent_id is None:
                query = query.filter(Category.parent_id.is_(None))
            else:
                query = query.filter(Category.parent_id == parent_id)
        if parent_ids is not None:
            query = query.filter(Category.parent_id.in_(list(parent_ids)))
        if is_active is not None:
            query = query.filter(Category.is_active.is_(is_active))
        return query

    @staticmethod
    def _sibling_order(query: Query) -> Query:
        return query.order_by(Category.sort_order.asc(), Category.name.asc())

    def find_many(
        self,
        *,
        parent_id=UNSET,
        parent_ids: Optional[Iterable[str]] = None,
        is_active: Optional[bool] = None,
    ) -> List[Category]:
        query = self._filtered(
            parent_id=parent_id, parent_ids=parent_ids, is_active=is_active
        )
        return self._sibling_order(query).all()

    def count(
        self,
        *,
        parent_id=UNSET,
        is_active: Optional[bool] = None,
    ) -> int:
        return self._filtered(parent_id=parent_id, is_active=is_active).count()

    # ----- lookups -----------------------------------------------------
    def get_for_update(self, category_id: str) -> Category | None:
        """Load a category and lock its row where the dialect supports it."""
        return (
            self.db.query(Category)
            .filter(Category.id == category_id)
            .with_for_update()
            .first()
        )

    def get_by_slug(
        self, slug: str, exclude_id: Optional[str] = None
    ) -> Category | None:
        query = self.db.query(Category).filter(Category.slug == slug)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def parent_id_of(self, category_id: str) -> Optional[str]:
        """Parent id of a category; None for roots and unknown ids."""
        row = (
            self.db.query(Category.parent_id)
            .filter(Category.id == category_id)
            .first()
        )
        return row.parent_id if row else None

    def child_ids_of(self, parent_ids: Iterable[str]) -> List[str]:
        """Ids of all direct children of the given parents, active or not."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        rows = (
            self.db.query(Category.id)
            .filter(Category.parent_id.in_(parent_ids))
            .all()
        )
        return [row.id for row in rows]

    def child_counts(
        self, parent_ids: Iterable[str], active_only: bool = True
    ) -> Dict[str, int]:
        parent_ids = list(parent_ids)
        if not parent_ids:
            return {}
        query = self.db.query(Category.parent_id, func.count(Category.id)).filter(
            Category.parent_id.in_(parent_ids)
        )
        if active_only:
            query = query.filter(Category.is_active.is_(True))
        return dict(query.group_by(Category.parent_id).all())

    def search(self, term: str, limit: int) -> Sequence[Category]:
        query = self.db.query(Category).filter(
            Category.is_active.is_(True),
            or_(
                Category.name.icontains(term, autoescape=True),
                Category.slug.icontains(term, autoescape=True),
            ),
        )
        return self._sibling_order(query).limit(limit).all()

    def active_ordered(self, include_inactive: bool = False) -> List[Category]:
        return self.find_many(is_active=None if include_inactive else True)

    # ----- statistics / integrity ----------------------------------------
    def count_leaves(self) -> int:
        return self.db.query(Category).filter(~Category.children.any()).count()

    def count_intermediate(self) -> int:
        """Categories that have both a parent and at least one child."""
        return (
            self.db.query(Category)
            .filter(Category.parent_id.isnot(None), Category.children.any())
            .count()
        )

    def count_services(self, category_id: str) -> int:
        """Listings filed under the category plus listing items tagged with it."""
        listings = (
            self.db.query(Listing)
            .filter(Listing.category_id == category_id)
            .count()
        )
        tagged_items = (
            self.db.query(func.count())
            .select_from(listing_item_categories)
            .filter(listing_item_categories.c.category_id == category_id)
            .scalar()
        )
        return listings + tagged_items

    def count_all_services(self) -> int:
        """Listings plus item tags that reference any category at all."""
        listings = self.db.query(Listing).count()
        tagged_items = (
            self.db.query(func.count())
            .select_from(listing_item_categories)
            .scalar()
        )
        return listings + tagged_items

    # ----- bulk maintenance ----------------------------------------------
    def leaves(self) -> List[Category]:
        return self.db.query(Category).filter(~Category.children.any()).all()

    def detach_all(self) -> int:
        """Null every parent pointer; returns the number of rows touched."""
        return (
            self.db.query(Category)
            .filter(Category.parent_id.isnot(None))
            .update({Category.parent_id: None}, synchronize_session="fetch")
        )
