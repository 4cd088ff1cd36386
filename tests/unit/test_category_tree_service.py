"""Unit tests for CategoryTreeService traversals."""

import random
from unittest.mock import Mock

import pytest

from marketplace.domain.filters import CategoryFilter
from marketplace.models.category_model import Category
from marketplace.services.category_tree_service import CategoryTreeService
from marketplace.utils.object_id import generate_object_id


def _ids(*categories):
    return {c.id for c in categories}


def _force_cycle(db_session, a, b):
    """Make a and b each other's parent, as corrupted data would."""
    a.parent_id = b.id
    b.parent_id = a.id
    db_session.commit()


class TestGetDescendants:
    def test_closure_of_root(self, uow, sample_tree):
        t = sample_tree
        result = CategoryTreeService(uow).get_descendants({t["home"].id})

        assert result == _ids(
            t["home"], t["cleaning"], t["deep"], t["carpets"], t["windows"], t["garden"]
        )
        assert t["events"].id not in result
        assert t["catering"].id not in result

    def test_multiple_seeds(self, uow, sample_tree):
        t = sample_tree
        result = CategoryTreeService(uow).get_descendants({t["deep"].id, t["events"].id})

        assert result == _ids(t["deep"], t["carpets"], t["events"], t["catering"])

    def test_includes_inactive_children(self, uow, make_category):
        root = make_category("Root")
        hidden = make_category("Hidden", parent=root, is_active=False)

        result = CategoryTreeService(uow).get_descendants({root.id})

        assert hidden.id in result

    def test_repeated_calls_match(self, uow, sample_tree):
        service = CategoryTreeService(uow)
        seeds = {sample_tree["cleaning"].id}

        assert service.get_descendants(seeds) == service.get_descendants(seeds)

    def test_unknown_id_is_a_childless_seed(self, uow, sample_tree):
        unknown = generate_object_id()

        assert CategoryTreeService(uow).get_descendants({unknown}) == {unknown}

    def test_empty_input_issues_no_queries(self):
        uow = Mock()

        assert CategoryTreeService(uow).get_descendants(set()) == set()
        uow.categories.child_ids_of.assert_not_called()

    def test_one_query_per_level(self):
        uow = Mock()
        uow.categories.child_ids_of.side_effect = [["b", "c"], ["d"], []]

        result = CategoryTreeService(uow).get_descendants({"a"})

        assert result == {"a", "b", "c", "d"}
        assert uow.categories.child_ids_of.call_count == 3

    def test_terminates_on_cycle(self, db_session, uow, make_category):
        a = make_category("Alpha")
        b = make_category("Beta", parent=a)
        _force_cycle(db_session, a, b)

        assert CategoryTreeService(uow).get_descendants({a.id}) == {a.id, b.id}

    def test_does_not_requery_visited_ids(self):
        uow = Mock()
        # "a" shows up again as a child of "b"
        uow.categories.child_ids_of.side_effect = [["b"], ["a"]]

        result = CategoryTreeService(uow).get_descendants({"a"})

        assert result == {"a", "b"}
        assert uow.categories.child_ids_of.call_count == 2


class TestValidateSubcategoryIds:
    def test_keeps_only_descendants(self, uow, sample_tree):
        t = sample_tree
        result = CategoryTreeService(uow).validate_subcategory_ids(
            t["home"].id, {t["carpets"].id, t["catering"].id}
        )

        assert result == {t["carpets"].id}

    def test_empty_candidates(self, uow, sample_tree):
        assert CategoryTreeService(uow).validate_subcategory_ids(sample_tree["home"].id, []) == set()


class TestBuildCategoryFilter:
    @pytest.mark.parametrize("category_id", [None, "", "all"])
    def test_unrestricted(self, category_id):
        uow = Mock()

        result = CategoryTreeService(uow).build_category_filter(category_id, ["x"])

        assert result.is_unrestricted
        uow.categories.child_ids_of.assert_not_called()

    def test_expands_category_without_subcategories(self, uow, sample_tree):
        t = sample_tree
        result = CategoryTreeService(uow).build_category_filter(t["cleaning"].id)

        assert result.category_ids == frozenset(
            _ids(t["cleaning"], t["deep"], t["carpets"], t["windows"])
        )

    def test_expands_valid_subcategories(self, uow, sample_tree):
        t = sample_tree
        result = CategoryTreeService(uow).build_category_filter(
            t["home"].id, [t["deep"].id, t["catering"].id]
        )

        assert result.category_ids == frozenset(_ids(t["deep"], t["carpets"]))

    def test_unrelated_subcategories_fall_back_to_category(self, uow, sample_tree):
        t = sample_tree
        service = CategoryTreeService(uow)

        with_unrelated = service.build_category_filter(t["cleaning"].id, [t["catering"].id])
        without = service.build_category_filter(t["cleaning"].id, None)

        assert with_unrelated == without
        assert isinstance(without, CategoryFilter)


class TestCheckCircularReference:
    def test_self_parent_without_store_queries(self):
        uow = Mock()

        assert CategoryTreeService(uow).check_circular_reference("x", "x") is True
        assert uow.categories.method_calls == []

    def test_descendant_as_parent_is_circular(self, uow, sample_tree):
        t = sample_tree
        assert CategoryTreeService(uow).check_circular_reference(t["home"].id, t["carpets"].id) is True

    def test_unrelated_parent_is_fine(self, uow, sample_tree):
        t = sample_tree
        assert CategoryTreeService(uow).check_circular_reference(t["cleaning"].id, t["events"].id) is False

    def test_moving_under_sibling_is_fine(self, uow, sample_tree):
        t = sample_tree
        assert CategoryTreeService(uow).check_circular_reference(t["garden"].id, t["windows"].id) is False

    def test_unknown_parent_ends_walk(self, uow, sample_tree):
        assert CategoryTreeService(uow).check_circular_reference(
            sample_tree["home"].id, generate_object_id()
        ) is False

    def test_existing_cycle_terminates(self, db_session, uow, make_category):
        a = make_category("Alpha")
        b = make_category("Beta", parent=a)
        _force_cycle(db_session, a, b)
        outsider = make_category("Outsider")

        assert CategoryTreeService(uow).check_circular_reference(outsider.id, a.id) is True

    def test_walk_is_capped_by_category_count(self):
        uow = Mock()
        uow.categories.count.return_value = 3
        # An ever-growing chain that never reaches a root
        uow.categories.parent_id_of.side_effect = (f"n{i}" for i in range(1, 1000))

        assert CategoryTreeService(uow).check_circular_reference("target", "n0") is True
        assert uow.categories.parent_id_of.call_count <= 3


class TestBuildCategoryPaths:
    def test_root_to_leaf_paths(self, uow, sample_tree):
        t = sample_tree
        paths = CategoryTreeService(uow).build_category_paths([t["carpets"].id, t["events"].id])

        assert paths == [["Home", "Cleaning", "Deep Cleaning", "Carpets"], ["Events"]]

    def test_order_and_duplicates_preserved(self, uow, sample_tree):
        t = sample_tree
        paths = CategoryTreeService(uow).build_category_paths(
            [t["garden"].id, t["catering"].id, t["garden"].id]
        )

        assert paths == [["Home", "Garden"], ["Events", "Catering"], ["Home", "Garden"]]

    def test_missing_categories_are_skipped(self, uow, sample_tree):
        paths = CategoryTreeService(uow).build_category_paths(
            [generate_object_id(), sample_tree["windows"].id]
        )

        assert paths == [["Home", "Cleaning", "Windows"]]

    def test_missing_ancestor_truncates(self, db_session, uow, make_category):
        orphan = make_category("Orphan")
        orphan.parent_id = generate_object_id()
        db_session.commit()
        child = make_category("Child", parent=orphan)

        assert CategoryTreeService(uow).build_category_paths([child.id]) == [["Orphan", "Child"]]

    def test_cycle_produces_truncated_path(self, db_session, uow, make_category):
        a = make_category("Alpha")
        b = make_category("Beta", parent=a)
        _force_cycle(db_session, a, b)

        assert CategoryTreeService(uow).build_category_paths([a.id]) == [["Beta", "Alpha"]]

    def test_empty_input(self):
        assert CategoryTreeService(Mock()).build_category_paths([]) == []


def _category(name, parent=None, sort_order=0):
    return Category(
        id=generate_object_id(),
        name=name,
        slug=name.lower(),
        parent_id=parent.id if parent else None,
        sort_order=sort_order,
        is_active=True,
    )


def _random_forest(seed):
    rng = random.Random(seed)
    categories = []
    frontier = [None]
    for level in range(rng.randint(0, 5)):
        next_frontier = []
        for parent in frontier:
            for i in range(rng.randint(0 if parent else 1, 3)):
                node = _category(f"L{level}-{len(categories)}-{i}", parent, rng.randint(0, 3))
                categories.append(node)
                next_frontier.append(node)
        frontier = next_frontier
    rng.shuffle(categories)
    return categories


def _flatten(nodes, parent_id=None, out=None):
    out = {} if out is None else out
    for node in nodes:
        out[node["id"]] = parent_id
        _flatten(node["children"], node["id"], out)
    return out


class TestBuildTree:
    @pytest.mark.parametrize("seed", range(8))
    def test_round_trip_reproduces_parent_mapping(self, seed):
        categories = _random_forest(seed)

        tree = CategoryTreeService.build_tree(categories)

        assert _flatten(tree) == {c.id: c.parent_id for c in categories}

    def test_siblings_ordered_by_sort_order_then_name(self):
        root = _category("Root")
        c = _category("C", root, 3)
        a = _category("A", root, 1)
        b = _category("B", root, 2)
        tie_z = _category("Z", root, 5)
        tie_m = _category("M", root, 5)

        tree = CategoryTreeService.build_tree([c, tie_z, a, root, b, tie_m])

        assert [n["name"] for n in tree[0]["children"]] == ["A", "B", "C", "M", "Z"]

    def test_nodes_carry_category_fields(self):
        root = _category("Root")
        leaf = _category("Leaf", root)

        tree = CategoryTreeService.build_tree([leaf, root])

        assert tree[0]["id"] == root.id
        assert tree[0]["slug"] == "root"
        assert tree[0]["children"][0]["parent_id"] == root.id
        assert tree[0]["children"][0]["children"] == []

    def test_nodes_without_reachable_parent_are_dropped(self):
        root = _category("Root")
        stray = _category("Stray")
        stray.parent_id = generate_object_id()

        tree = CategoryTreeService.build_tree([root, stray])

        assert [n["name"] for n in tree] == ["Root"]

    def test_max_depth_truncates_children(self):
        root = _category("Root")
        mid = _category("Mid", root)
        _leaf = _category("Leaf", mid)

        tree = CategoryTreeService.build_tree([root, mid, _leaf], max_depth=2)

        assert tree[0]["children"][0]["name"] == "Mid"
        assert tree[0]["children"][0]["children"] == []

    def test_deep_chain_does_not_recurse(self):
        nodes = [_category("N0")]
        for i in range(1, 3000):
            nodes.append(_category(f"N{i}", nodes[-1]))

        tree = CategoryTreeService.build_tree(nodes)

        depth, node = 1, tree[0]
        while node["children"]:
            node = node["children"][0]
            depth += 1
        assert depth == 3000

    def test_empty(self):
        assert CategoryTreeService.build_tree([]) == []
