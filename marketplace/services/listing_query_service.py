from typing import Any, Dict, Iterable, List, Optional

from marketplace.domain.unit_of_work import IUnitOfWork
from marketplace.models.listing_model import Listing
from marketplace.services.category_tree_service import CategoryTreeService
from marketplace.utils.logger import get_logger

logger = get_logger("listing_query_service")


class ListingQueryService:
    """Category-aware listing lookups for the browse screens."""

    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.tree = CategoryTreeService(uow)

    @staticmethod
    def _to_dict(listing: Listing) -> Dict[str, Any]:
        return {
            "id": listing.id,
            "title": listing.title,
            "description": listing.description,
            "category_id": listing.category_id,
            "items": [
                {
                    "id": item.id,
                    "name": item.name,
                    "price": float(item.price) if item.price is not None else None,
                    "category_ids": sorted(c.id for c in item.categories),
                }
                for item in listing.items
            ],
        }

    def search(
        self,
        category_id: Optional[str] = None,
        subcategory_ids: Optional[Iterable[str]] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> List[Dict[str, Any]]:
        category_filter = self.tree.build_category_filter(
            category_id, subcategory_ids
        )
        listings = self.uow.listings.search(
            category_filter, offset=offset, limit=limit
        )
        logger.info(
            f"Listing search category={category_id}: {len(listings)} results"
        )
        return [self._to_dict(listing) for listing in listings]
