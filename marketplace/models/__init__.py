# Category first: listings reference it
from marketplace.models.category_model import Category
from marketplace.models.listing_model import (
    Listing,
    ListingItem,
    listing_item_categories,
)

__all__ = [
    "Category",
    "Listing",
    "ListingItem",
    "listing_item_categories",
]
