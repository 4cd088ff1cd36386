from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from marketplace.core.constants import (
    CATEGORY_CACHE_PREFIX,
    PATH_SEPARATOR,
    SEARCH_RESULT_LIMIT,
)
from marketplace.db.seed_data import DEFAULT_CATEGORY_TREE
from marketplace.domain.exceptions import (
    CategoriesInUse,
    CategoryHasChildren,
    CategoryHasServices,
    CategoryNotFound,
    CircularCategoryReference,
    DuplicateCategorySlug,
    InvalidDataFormat,
    ParentCategoryNotFound,
    RequiredFieldMissing,
    SelfParentReference,
)
from marketplace.domain.unit_of_work import IUnitOfWork
from marketplace.models.category_model import Category
from marketplace.schemas.category_schema import CategorySchema
from marketplace.services.category_tree_service import (
    CategoryTreeService,
    category_to_dict,
)
from marketplace.utils.cache import cache
from marketplace.utils.logger import get_logger
from marketplace.utils.slug import slugify

logger = get_logger("category_service")

# Columns that exist but may never be set to NULL through an update
NON_NULLABLE_FIELDS = ("name", "sort_order", "is_active")


class CategoryService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.tree = CategoryTreeService(uow)

    # ------------------------------------------------------------------
    # read side
    # ------------------------------------------------------------------
    def _summaries(self, categories: List[Category]) -> List[Dict[str, Any]]:
        counts = self.uow.categories.child_counts([c.id for c in categories])
        return [
            {
                "id": c.id,
                "name": c.name,
                "slug": c.slug,
                "description": c.description,
                "sort_order": c.sort_order,
                "children_count": counts.get(c.id, 0),
            }
            for c in categories
        ]

    def list_root(self) -> List[Dict[str, Any]]:
        """Active top-level categories with their active child counts."""
        roots = self.uow.categories.find_many(parent_id=None, is_active=True)
        return self._summaries(roots)

    def list_children(self, category_id: str) -> List[Dict[str, Any]]:
        """Active direct children only, not the whole subtree."""
        children = self.uow.categories.find_many(
            parent_id=category_id, is_active=True
        )
        return self._summaries(children)

    def has_children(self, category_id: str) -> Dict[str, Any]:
        child_count = self.uow.categories.count(
            parent_id=category_id, is_active=True
        )
        return {"has_children": child_count > 0, "child_count": child_count}

    def get(self, category_id: str) -> Category:
        category = self.uow.categories.get(category_id)
        if category is None:
            raise CategoryNotFound(category_id)
        return category

    def get_detail(self, category_id: str) -> Dict[str, Any]:
        """Category with a parent summary and child/service counts."""
        category = self.get(category_id)
        parent = category.parent
        detail = category_to_dict(category)
        detail.update(
            created_at=category.created_at,
            updated_at=category.updated_at,
            parent=(
                {"id": parent.id, "name": parent.name, "slug": parent.slug}
                if parent is not None
                else None
            ),
            counts={
                "children": self.uow.categories.count(parent_id=category.id),
                "services": self.uow.categories.count_services(category.id),
            },
        )
        return detail

    def search(
        self, q: Optional[str], limit: int = SEARCH_RESULT_LIMIT
    ) -> List[Dict[str, Any]]:
        term = (q or "").strip()
        if not term:
            raise RequiredFieldMissing("q")

        matches = self.uow.categories.search(term, limit)
        lookup: Dict[str, Any] = {c.id: c for c in matches}
        results = []
        for category in matches:
            result = category_to_dict(category)
            result["path"] = PATH_SEPARATOR.join(
                self.tree.category_path(category.id, lookup)
            )
            results.append(result)
        logger.info(f"Category search {term!r}: {len(results)} results")
        return results

    @cache.cacheable(lambda self: f"{CATEGORY_CACHE_PREFIX}:flat")
    def list_flat(self) -> List[Dict[str, Any]]:
        """All active categories in sibling order, for client-side trees."""
        return [
            category_to_dict(c) for c in self.uow.categories.active_ordered()
        ]

    @cache.cacheable(
        lambda self, include_inactive=False, max_depth=None: (
            f"{CATEGORY_CACHE_PREFIX}:tree:{int(include_inactive)}:{max_depth}"
        )
    )
    def admin_tree(
        self, include_inactive: bool = False, max_depth: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        categories = self.uow.categories.active_ordered(
            include_inactive=include_inactive
        )
        return self.tree.build_tree(categories, max_depth=max_depth)

    def stats(self) -> Dict[str, int]:
        total = self.uow.categories.count()
        roots = self.uow.categories.count(parent_id=None)
        leaves = self.uow.categories.count_leaves()
        intermediate = self.uow.categories.count_intermediate()
        return {
            "total_categories": total,
            "root_categories": roots,
            "leaf_categories": leaves,
            "intermediate_categories": intermediate,
        }

    # ------------------------------------------------------------------
    # write side
    # ------------------------------------------------------------------
    def _slug_for(self, name: str, exclude_id: Optional[str] = None) -> str:
        slug = slugify(name)
        if not slug:
            raise InvalidDataFormat("name", "at least one letter or digit")
        if self.uow.categories.get_by_slug(slug, exclude_id=exclude_id):
            raise DuplicateCategorySlug(slug)
        return slug

    def _ensure_parent(self, category_id: Optional[str], parent_id: str) -> None:
        if category_id is not None and parent_id == category_id:
            raise SelfParentReference()
        if self.uow.categories.get(parent_id) is None:
            raise ParentCategoryNotFound(parent_id)
        if category_id is not None and self.tree.check_circular_reference(
            category_id, parent_id
        ):
            raise CircularCategoryReference()

    def _flush(self, slug: str) -> None:
        try:
            self.uow.flush()
        except IntegrityError as e:
            # Lost a race on the unique slug index
            logger.warning(f"Slug conflict on flush for {slug!r}: {e.orig}")
            raise DuplicateCategorySlug(slug) from e

    def create(self, payload: CategorySchema.Create) -> Category:
        """Create a category; the slug is derived from the name."""
        with self.uow:
            slug = self._slug_for(payload.name)
            if payload.parent_id:
                self._ensure_parent(None, payload.parent_id)

            category = Category(
                name=payload.name,
                slug=slug,
                description=payload.description,
                parent_id=payload.parent_id or None,
                sort_order=payload.sort_order or 0,
                is_active=True,
            )
            self.uow.categories.add(category)
            self._flush(slug)

        cache.invalidate(CATEGORY_CACHE_PREFIX)
        logger.info(f"Created category {category.id} ({slug})")
        return category

    def update(
        self, category_id: str, payload: CategorySchema.Update
    ) -> Category:
        """Apply a partial update; rename and re-parent are validated first."""
        changes = payload.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise RequiredFieldMissing(field)

        with self.uow:
            category = self.uow.categories.get_for_update(category_id)
            if category is None:
                raise CategoryNotFound(category_id)

            name = changes.get("name")
            if name is not None and name != category.name:
                changes["slug"] = self._slug_for(name, exclude_id=category.id)

            if "parent_id" in changes:
                # Empty or null parent moves the category to the root
                changes["parent_id"] = changes["parent_id"] or None
                if changes["parent_id"] is not None:
                    self._ensure_parent(category.id, changes["parent_id"])

            for field, value in changes.items():
                setattr(category, field, value)
            self._flush(category.slug)

        cache.invalidate(CATEGORY_CACHE_PREFIX)
        logger.info(f"Updated category {category_id}: {sorted(changes)}")
        return category

    def delete(self, category_id: str) -> None:
        """Delete a childless, serviceless category; never cascades."""
        with self.uow:
            category = self.uow.categories.get_for_update(category_id)
            if category is None:
                raise CategoryNotFound(category_id)

            child_count = self.uow.categories.count(parent_id=category.id)
            if child_count > 0:
                raise CategoryHasChildren(child_count)

            service_count = self.uow.categories.count_services(category.id)
            if service_count > 0:
                raise CategoryHasServices(service_count)

            self.uow.categories.delete(category)

        cache.invalidate(CATEGORY_CACHE_PREFIX)
        logger.info(f"Deleted category {category_id}")

    # ------------------------------------------------------------------
    # bulk maintenance
    # ------------------------------------------------------------------
    def seed(self, tree: Sequence[Dict[str, Any]] = DEFAULT_CATEGORY_TREE) -> int:
        """Load a starter tree into an empty store; returns how many were created.

        Every node goes through ``create``, so slug and parent checks apply.
        A store that already holds categories is left alone.
        """
        existing = self.uow.categories.count()
        if existing:
            logger.warning(
                f"{existing} categories already exist, skipping seed. "
                "Clear them first to replace the tree."
            )
            return 0

        created = 0
        stack = [(None, i, node) for i, node in reversed(list(enumerate(tree)))]
        while stack:
            parent_id, sort_order, node = stack.pop()
            category = self.create(
                CategorySchema.Create(
                    name=node["name"],
                    description=node.get("description"),
                    parent_id=parent_id,
                    sort_order=sort_order,
                )
            )
            created += 1
            children = node.get("children") or []
            stack.extend(
                (category.id, i, child)
                for i, child in reversed(list(enumerate(children)))
            )

        logger.info(f"Seeded {created} categories")
        return created

    def clear(self) -> int:
        """Delete every category, leaves first; returns how many were removed.

        Refuses while any listing or listing item still references a category.
        """
        with self.uow:
            service_count = self.uow.categories.count_all_services()
            if service_count > 0:
                raise CategoriesInUse(service_count)

            deleted = 0
            leaves = self.uow.categories.leaves()
            while leaves:
                for category in leaves:
                    self.uow.categories.delete(category)
                self.uow.flush()
                deleted += len(leaves)
                leaves = self.uow.categories.leaves()

            remaining = self.uow.categories.get_all()
            if remaining:
                # Only a parent cycle leaves rows with no leaf among them
                logger.warning(
                    f"{len(remaining)} categories form a parent cycle, "
                    "detaching before delete"
                )
                self.uow.categories.detach_all()
                for category in remaining:
                    self.uow.categories.delete(category)
                deleted += len(remaining)

        cache.invalidate(CATEGORY_CACHE_PREFIX)
        logger.info(f"Cleared {deleted} categories")
        return deleted

    def reset(self, tree: Sequence[Dict[str, Any]] = DEFAULT_CATEGORY_TREE) -> Dict[str, int]:
        deleted = self.clear()
        created = self.seed(tree)
        return {"deleted": deleted, "created": created}
