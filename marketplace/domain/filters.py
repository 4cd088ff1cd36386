from dataclasses import dataclass
from typing import FrozenSet, Optional

from sqlalchemy import or_, true
from sqlalchemy.sql.elements import ColumnElement

from marketplace.models.category_model import Category
from marketplace.models.listing_model import Listing, ListingItem


@dataclass(frozen=True)
class CategoryFilter:
    """Restricts listings to an expanded set of category ids.

    ``category_ids`` of None means no restriction. A listing matches when its
    own category is in the set OR any of its items is tagged with one.
    """

    category_ids: Optional[FrozenSet[str]] = None

    @classmethod
    def unrestricted(cls) -> "CategoryFilter":
        return cls()

    @property
    def is_unrestricted(self) -> bool:
        return self.category_ids is None

    def clause(self) -> ColumnElement:
        if self.category_ids is None:
            return true()
        ids = sorted(self.category_ids)
        return or_(
            Listing.category_id.in_(ids),
            Listing.items.any(ListingItem.categories.any(Category.id.in_(ids))),
        )
