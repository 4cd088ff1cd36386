from fastapi import APIRouter

from marketplace.api.v1.routers.category_router import category_router
from marketplace.api.v1.routers.listing_router import listing_router

api_router = APIRouter()

api_router.include_router(category_router)
api_router.include_router(listing_router)
