"""
Tests de las funciones puras sobre la jerarquía de categorías
"""
from types import SimpleNamespace

from app.services import category_tree


def cat(id, title, parent_id=None):
    return SimpleNamespace(id=id, title=title, parent_id=parent_id)


class TestComputeDepth:

    def test_root_has_depth_zero(self):
        assert category_tree.compute_depth(1, {1: None}) == 0

    def test_depth_counts_parent_hops(self):
        parents = {1: None, 2: 1, 3: 2, 4: 3}
        assert category_tree.compute_depth(2, parents) == 1
        assert category_tree.compute_depth(4, parents) == 3

    def test_unknown_id_is_root(self):
        assert category_tree.compute_depth(99, {1: None}) == 0

    def test_cycle_terminates(self):
        parents = {1: 2, 2: 3, 3: 1}
        depth = category_tree.compute_depth(1, parents)
        assert depth <= category_tree.MAX_CATEGORY_DEPTH
        assert depth == 2

    def test_self_parent_terminates(self):
        assert category_tree.compute_depth(1, {1: 1}) == 0

    def test_long_chain_is_capped(self):
        parents = {i: i - 1 for i in range(1, 30)}
        parents[0] = None
        assert category_tree.compute_depth(29, parents) == 10


class TestListForPicker:

    def test_excludes_category_being_edited(self):
        categories = [cat(1, "Jewelry"), cat(2, "Rings", 1), cat(3, "Bags")]
        ids = [c.id for c, _ in category_tree.list_for_picker(2, categories)]
        assert 2 not in ids
        assert sorted(ids) == [1, 3]

    def test_orders_by_depth_then_title_case_insensitive(self):
        categories = [
            cat(1, "jewelry"),
            cat(2, "Rings", 1),
            cat(3, "Bags"),
            cat(4, "earrings", 1),
            cat(5, "Gold", 2),
        ]
        result = category_tree.list_for_picker(None, categories)
        assert [(c.title, d) for c, d in result] == [
            ("Bags", 0),
            ("jewelry", 0),
            ("earrings", 1),
            ("Rings", 1),
            ("Gold", 2),
        ]

    def test_label_indents_by_depth(self):
        assert category_tree.picker_label("Gold", 0) == "Gold"
        assert category_tree.picker_label("Gold", 2) == "— — Gold"


class TestWouldCreateCycle:

    def test_none_parent_never_cycles(self):
        assert category_tree.would_create_cycle(1, None, {1: None}) is False

    def test_self_parent(self):
        assert category_tree.would_create_cycle(1, 1, {1: None}) is True

    def test_descendant_as_parent(self):
        parents = {1: None, 2: 1, 3: 2}
        assert category_tree.would_create_cycle(1, 3, parents) is True

    def test_unrelated_parent(self):
        parents = {1: None, 2: 1, 3: None}
        assert category_tree.would_create_cycle(2, 3, parents) is False

    def test_existing_cycle_elsewhere_terminates(self):
        parents = {1: None, 2: 3, 3: 2}
        assert category_tree.would_create_cycle(1, 2, parents) is False


class TestScope:

    def test_subcategory_filter_wins(self):
        assert category_tree.scope_from_children(1, [2, 3], 3) == [3]

    def test_children_included_one_level(self):
        assert category_tree.scope_from_children(1, [2, 3]) == [1, 2, 3]

    def test_no_children(self):
        assert category_tree.scope_from_children(1, []) == [1]

    def test_parse_subcategory_filter(self):
        assert category_tree.parse_subcategory_filter("7") == 7
        assert category_tree.parse_subcategory_filter(" 7 ") == 7
        assert category_tree.parse_subcategory_filter("abc") is None
        assert category_tree.parse_subcategory_filter("") is None
        assert category_tree.parse_subcategory_filter(None) is None
        assert category_tree.parse_subcategory_filter("0") is None
        assert category_tree.parse_subcategory_filter("-4") is None
        assert category_tree.parse_subcategory_filter(str(2**31)) is None
        assert category_tree.parse_subcategory_filter(str(2**31 - 1)) == 2**31 - 1
