from typing import List

from fastapi import APIRouter, Depends

from marketplace.api.v1.dependencies import (
    CategoryFilterParams,
    category_filter_params,
    get_uow,
)
from marketplace.domain.unit_of_work import UnitOfWork
from marketplace.schemas.common_schema import ApiResponse
from marketplace.schemas.listing_schema import ListingSchema
from marketplace.services.listing_query_service import ListingQueryService


class ListingRouter:
    def __init__(self):
        self.router = APIRouter(prefix="/listings", tags=["Listings"])
        self._register()

    def _register(self):
        self.router.get("", response_model=ApiResponse[List[ListingSchema.Out]])(self._search)

    async def _search(
        self,
        params: CategoryFilterParams = Depends(category_filter_params),
        uow: UnitOfWork = Depends(get_uow),
    ):
        data = ListingQueryService(uow).search(
            params.category_id,
            params.subcategory_ids,
            offset=params.offset,
            limit=params.limit,
        )
        return ApiResponse(data=data, message="Listings retrieved successfully")


listing_router = ListingRouter().router
