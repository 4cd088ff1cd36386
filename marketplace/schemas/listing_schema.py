from typing import List, Optional

from marketplace.schemas.common_schema import CamelModel


class ListingSchema:
    class ItemOut(CamelModel):
        id: str
        name: str
        price: Optional[float] = None
        category_ids: List[str] = []

    class Out(CamelModel):
        id: str
        title: str
        description: Optional[str] = None
        category_id: str
        items: List["ListingSchema.ItemOut"] = []


ListingSchema.Out.model_rebuild()
