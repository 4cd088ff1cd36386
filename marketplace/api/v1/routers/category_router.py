from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from marketplace.api.v1.dependencies import get_uow, valid_category_id
from marketplace.core.constants import TREE_MAX_DEPTH_LIMIT
from marketplace.domain.unit_of_work import UnitOfWork
from marketplace.schemas.category_schema import CategorySchema
from marketplace.schemas.common_schema import ApiResponse
from marketplace.services.category_service import CategoryService
from marketplace.utils.logger import get_logger

logger = get_logger("category_router")


class CategoryRouter:
    def __init__(self):
        self.router = APIRouter(prefix="/categories", tags=["Categories"])
        self._register()

    def _register(self):
        # Fixed paths first so they are not captured by /{category_id}
        self.router.get("/primary", response_model=ApiResponse[List[CategorySchema.Summary]])(self._list_root)
        self.router.get("/tree", response_model=ApiResponse[List[CategorySchema.Out]])(self._list_flat)
        self.router.get("/search", response_model=ApiResponse[List[CategorySchema.SearchResult]])(self._search)
        self.router.get("/admin/tree", response_model=ApiResponse[List[CategorySchema.TreeNode]])(self._admin_tree)
        self.router.get("/admin/stats", response_model=ApiResponse[CategorySchema.Stats])(self._stats)
        self.router.post("/admin/seed", response_model=ApiResponse[CategorySchema.BulkResult])(self._seed)
        self.router.delete("/admin/clear", response_model=ApiResponse[CategorySchema.BulkResult])(self._clear)
        self.router.post("/admin/reset", response_model=ApiResponse[CategorySchema.BulkResult])(self._reset)
        self.router.post("/admin", response_model=ApiResponse[CategorySchema.Out], status_code=status.HTTP_201_CREATED)(self._create_category)
        self.router.put("/admin/{category_id}", response_model=ApiResponse[CategorySchema.Out])(self._update_category)
        self.router.delete("/admin/{category_id}", response_model=ApiResponse[None])(self._delete_category)
        self.router.get("/{category_id}/children", response_model=ApiResponse[List[CategorySchema.Summary]])(self._list_children)
        self.router.get("/{category_id}/has-children", response_model=ApiResponse[CategorySchema.ChildrenCheck])(self._has_children)
        self.router.get("/{category_id}", response_model=ApiResponse[CategorySchema.Detail])(self._get_category)

    async def _list_root(self, uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).list_root()
        return ApiResponse(data=data, message="Root categories retrieved successfully")

    async def _list_flat(self, uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).list_flat()
        return ApiResponse(data=data, message="All categories retrieved successfully")

    async def _search(self, q: Optional[str] = Query(None), uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).search(q)
        return ApiResponse(data=data, message="Categories search completed successfully")

    async def _admin_tree(
        self,
        include_inactive: bool = Query(False, alias="includeInactive"),
        max_depth: Optional[int] = Query(None, alias="maxDepth", ge=1, le=TREE_MAX_DEPTH_LIMIT),
        uow: UnitOfWork = Depends(get_uow),
    ):
        logger.info(f"Building admin category tree (inactive={include_inactive}, depth={max_depth})")
        data = CategoryService(uow).admin_tree(include_inactive=include_inactive, max_depth=max_depth)
        return ApiResponse(data=data, message="Category tree retrieved successfully")

    async def _stats(self, uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).stats()
        return ApiResponse(data=data, message="Category statistics retrieved successfully")

    async def _seed(self, uow: UnitOfWork = Depends(get_uow)):
        logger.info("Admin triggered category seeding")
        created = CategoryService(uow).seed()
        message = "Categories seeded successfully" if created else "Categories already exist, nothing seeded"
        return ApiResponse(data={"created": created}, message=message)

    async def _clear(self, uow: UnitOfWork = Depends(get_uow)):
        logger.info("Admin triggered category clearing")
        deleted = CategoryService(uow).clear()
        return ApiResponse(data={"deleted": deleted}, message="All categories cleared successfully")

    async def _reset(self, uow: UnitOfWork = Depends(get_uow)):
        logger.info("Admin triggered category reset")
        data = CategoryService(uow).reset()
        return ApiResponse(data=data, message="Categories reset successfully")

    async def _create_category(self, payload: CategorySchema.Create, uow: UnitOfWork = Depends(get_uow)):
        logger.info(f"Creating category {payload.name!r}")
        category = CategoryService(uow).create(payload)
        return ApiResponse(data=CategorySchema.Out.model_validate(category), message="Category created successfully")

    async def _update_category(
        self,
        payload: CategorySchema.Update,
        category_id: str = Depends(valid_category_id),
        uow: UnitOfWork = Depends(get_uow),
    ):
        logger.info(f"Updating category {category_id}")
        category = CategoryService(uow).update(category_id, payload)
        return ApiResponse(data=CategorySchema.Out.model_validate(category), message="Category updated successfully")

    async def _delete_category(self, category_id: str = Depends(valid_category_id), uow: UnitOfWork = Depends(get_uow)):
        logger.info(f"Deleting category {category_id}")
        CategoryService(uow).delete(category_id)
        return ApiResponse(message="Category deleted successfully")

    async def _list_children(self, category_id: str = Depends(valid_category_id), uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).list_children(category_id)
        return ApiResponse(data=data, message="Category children retrieved successfully")

    async def _has_children(self, category_id: str = Depends(valid_category_id), uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).has_children(category_id)
        return ApiResponse(data=data, message="Category children check completed")

    async def _get_category(self, category_id: str = Depends(valid_category_id), uow: UnitOfWork = Depends(get_uow)):
        data = CategoryService(uow).get_detail(category_id)
        return ApiResponse(data=data, message="Category retrieved successfully")


category_router = CategoryRouter().router
