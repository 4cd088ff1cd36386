from datetime import datetime
from typing import List, Optional

from pydantic import Field

from marketplace.core.constants import (
    CATEGORY_DESCRIPTION_MAX,
    CATEGORY_DESCRIPTION_MIN,
    CATEGORY_NAME_MAX,
    CATEGORY_NAME_MIN,
    CATEGORY_NAME_PATTERN,
    OBJECT_ID_PATTERN,
    SORT_ORDER_MAX,
    SORT_ORDER_MIN,
)
from marketplace.schemas.common_schema import CamelModel


class CategoryTreeNode(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    children: List["CategoryTreeNode"] = []


class CategorySchema:
    class Create(CamelModel):
        name: str = Field(
            min_length=CATEGORY_NAME_MIN,
            max_length=CATEGORY_NAME_MAX,
            pattern=CATEGORY_NAME_PATTERN,
        )
        description: Optional[str] = Field(
            None,
            min_length=CATEGORY_DESCRIPTION_MIN,
            max_length=CATEGORY_DESCRIPTION_MAX,
        )
        parent_id: Optional[str] = Field(None, pattern=OBJECT_ID_PATTERN)
        sort_order: int = Field(0, ge=SORT_ORDER_MIN, le=SORT_ORDER_MAX)

    class Update(CamelModel):
        name: Optional[str] = Field(
            None,
            min_length=CATEGORY_NAME_MIN,
            max_length=CATEGORY_NAME_MAX,
            pattern=CATEGORY_NAME_PATTERN,
        )
        description: Optional[str] = Field(
            None,
            min_length=CATEGORY_DESCRIPTION_MIN,
            max_length=CATEGORY_DESCRIPTION_MAX,
        )
        # null moves the category to the root
        parent_id: Optional[str] = Field(None, pattern=OBJECT_ID_PATTERN)
        sort_order: Optional[int] = Field(
            None, ge=SORT_ORDER_MIN, le=SORT_ORDER_MAX
        )
        is_active: Optional[bool] = None

    class Out(CamelModel):
        id: str
        name: str
        slug: str
        description: Optional[str] = None
        parent_id: Optional[str] = None
        sort_order: int = 0
        is_active: bool = True
        created_at: Optional[datetime] = None
        updated_at: Optional[datetime] = None

    class Summary(CamelModel):
        id: str
        name: str
        slug: str
        description: Optional[str] = None
        sort_order: int = 0
        children_count: int = 0

    class ParentSummary(CamelModel):
        id: str
        name: str
        slug: str

    class Counts(CamelModel):
        children: int = 0
        services: int = 0

    class Detail(Out):
        parent: Optional["CategorySchema.ParentSummary"] = None
        counts: "CategorySchema.Counts"

    class SearchResult(Out):
        path: str

    class ChildrenCheck(CamelModel):
        has_children: bool
        child_count: int

    class Stats(CamelModel):
        total_categories: int
        root_categories: int
        leaf_categories: int
        intermediate_categories: int

    class BulkResult(CamelModel):
        created: int = 0
        deleted: int = 0

    TreeNode = CategoryTreeNode


CategorySchema.Detail.model_rebuild()
