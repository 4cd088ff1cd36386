"""Traversals over the self-referential category tree.

Categories are stored flat with a ``parent_id`` pointer; every operation here
rebuilds the parent/child relationship on read. Walks are iterative and carry
a visited set so malformed (cyclic) data cannot loop forever.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from marketplace.core.constants import ALL_CATEGORIES
from marketplace.domain.filters import CategoryFilter
from marketplace.domain.unit_of_work import IUnitOfWork
from marketplace.utils.logger import get_logger

logger = get_logger("category_tree_service")


def sibling_sort_key(category) -> tuple:
    return (category.sort_order or 0, category.name)


def category_to_dict(category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "parent_id": category.parent_id,
        "sort_order": category.sort_order,
        "is_active": category.is_active,
    }


class CategoryTreeService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow

    # ------------------------------------------------------------------
    # descendant expansion
    # ------------------------------------------------------------------
    def get_descendants(self, category_ids: Iterable[str]) -> Set[str]:
        """Return the seeds plus every transitive child, one query per level.

        Activity is not considered here; callers filter on ``is_active``
        themselves when they need to.
        """
        seeds = {cid for cid in category_ids if cid}
        if not seeds:
            return set()

        visited = set(seeds)
        frontier = seeds
        while frontier:
            child_ids = self.uow.categories.child_ids_of(frontier)
            frontier = {cid for cid in child_ids if cid not in visited}
            visited |= frontier
        return visited

    def validate_subcategory_ids(
        self, parent_id: str, candidate_ids: Iterable[str]
    ) -> Set[str]:
        """Keep only the candidates that live somewhere under ``parent_id``."""
        candidates = {cid for cid in candidate_ids if cid}
        if not candidates:
            return set()
        valid = self.get_descendants({parent_id}) & candidates
        logger.info(
            f"Validated subcategory ids under {parent_id}: "
            f"{len(valid)}/{len(candidates)} valid"
        )
        return valid

    def build_category_filter(
        self,
        category_id: Optional[str] = None,
        subcategory_ids: Optional[Iterable[str]] = None,
    ) -> CategoryFilter:
        if not category_id or category_id == ALL_CATEGORIES:
            return CategoryFilter.unrestricted()

        subcategory_ids = [sid for sid in (subcategory_ids or []) if sid]
        if subcategory_ids:
            valid = self.validate_subcategory_ids(category_id, subcategory_ids)
            if valid:
                expanded = self.get_descendants(valid)
            else:
                logger.warning(
                    f"No subcategories of {category_id} in {subcategory_ids}, "
                    "falling back to the whole category"
                )
                expanded = self.get_descendants({category_id})
        else:
            expanded = self.get_descendants({category_id})

        logger.info(
            f"Category filter for {category_id}: {len(expanded)} categories"
        )
        return CategoryFilter(frozenset(expanded))

    # ------------------------------------------------------------------
    # ancestry
    # ------------------------------------------------------------------
    def check_circular_reference(
        self, category_id: str, proposed_parent_id: str
    ) -> bool:
        """True if making ``proposed_parent_id`` the parent would close a cycle.

        The upward walk is capped at the total number of categories; hitting
        the cap or revisiting a node means the stored data already holds a
        cycle, which is reported as circular too.
        """
        if proposed_parent_id == category_id:
            return True

        max_steps = self.uow.categories.count()
        visited: Set[str] = set()
        current: Optional[str] = proposed_parent_id
        while current is not None:
            if current == category_id:
                return True
            if current in visited or len(visited) >= max_steps:
                logger.warning(
                    f"Parent chain above {proposed_parent_id} does not reach "
                    "a root; treating as circular"
                )
                return True
            visited.add(current)
            current = self.uow.categories.parent_id_of(current)
        return False

    def category_path(
        self, category_id: str, lookup: Optional[Dict[str, Any]] = None
    ) -> List[str]:
        """Names from the root down to ``category_id``; empty if it is unknown.

        A missing ancestor truncates the path at that point.
        """
        lookup = {} if lookup is None else lookup
        names: List[str] = []
        visited: Set[str] = set()
        current = self._lookup(category_id, lookup)
        while current is not None and current.id not in visited:
            visited.add(current.id)
            names.append(current.name)
            current = (
                self._lookup(current.parent_id, lookup)
                if current.parent_id
                else None
            )
        names.reverse()
        return names

    def build_category_paths(
        self, category_ids: Sequence[str]
    ) -> List[List[str]]:
        """One root-to-leaf name path per known id, in input order."""
        lookup: Dict[str, Any] = {}
        paths: List[List[str]] = []
        for category_id in category_ids:
            path = self.category_path(category_id, lookup)
            if not path:
                logger.warning(f"Category not found: {category_id}, skipping")
                continue
            paths.append(path)
        logger.debug(
            f"Built {len(paths)} category paths from {len(category_ids)} ids"
        )
        return paths

    def _lookup(self, category_id: str, lookup: Dict[str, Any]):
        if category_id not in lookup:
            lookup[category_id] = self.uow.categories.get(category_id)
        return lookup[category_id]

    # ------------------------------------------------------------------
    # materialisation
    # ------------------------------------------------------------------
    @staticmethod
    def build_tree(
        categories: Sequence[Any], max_depth: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Nest a flat category list under its roots.

        Children are grouped by ``parent_id`` once, then attached with an
        explicit stack, so the cost is linear in the number of categories and
        independent of tree depth. Nodes whose parent is not in the list are
        unreachable and left out. With ``max_depth`` nodes at that depth get
        an empty ``children`` list.
        """
        by_parent: Dict[Optional[str], List[Any]] = defaultdict(list)
        for category in categories:
            by_parent[category.parent_id].append(category)
        for siblings in by_parent.values():
            siblings.sort(key=sibling_sort_key)

        def make_node(category) -> Dict[str, Any]:
            node = category_to_dict(category)
            node["children"] = []
            return node

        roots = [make_node(category) for category in by_parent.get(None, [])]
        stack = [(node, 1) for node in roots]
        while stack:
            node, depth = stack.pop()
            if max_depth is not None and depth >= max_depth:
                continue
            node["children"] = [
                make_node(child) for child in by_parent.get(node["id"], [])
            ]
            stack.extend((child, depth + 1) for child in node["children"])
        return roots
