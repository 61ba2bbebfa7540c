"""Tests for the ordering and cycle algorithms."""

from topogroup._graph import find_cycles, in_degrees, kahn_levels


def _levels(successors: dict) -> list[list]:
    return kahn_levels(list(successors), successors.__getitem__)


def _cycles(successors: dict) -> list[list]:
    return find_cycles(successors, successors.__getitem__)


class TestInDegrees:
    def test_counts_direct_predecessors(self) -> None:
        result = in_degrees(["a", "b", "c"], {"a": ["b", "c"], "b": ["c"], "c": []}.__getitem__)
        assert result == {"a": 0, "b": 1, "c": 2}

    def test_keeps_key_order(self) -> None:
        result = in_degrees(["z", "a"], {"z": [], "a": []}.__getitem__)
        assert list(result) == ["z", "a"]

    def test_counts_repeated_edges(self) -> None:
        result = in_degrees(["a", "b"], {"a": ["b", "b"], "b": []}.__getitem__)
        assert result["b"] == 2


class TestKahnLevels:
    """Tests for the level-grouped topological sort."""

    def test_empty_graph(self) -> None:
        assert _levels({}) == []

    def test_single_node(self) -> None:
        assert _levels({"a": []}) == [["a"]]

    def test_linear_chain(self) -> None:
        # a -> b -> c (c depends on b, b depends on a)
        assert _levels({"a": ["b"], "b": ["c"], "c": []}) == [["a"], ["b"], ["c"]]

    def test_diamond_dependency(self) -> None:
        # a -> b, a -> c, b -> d, c -> d
        result = _levels({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []})
        assert result == [["a"], ["b", "c"], ["d"]]

    def test_multiple_roots_keep_key_order(self) -> None:
        assert _levels({"b": ["c"], "a": ["c"], "c": []}) == [["b", "a"], ["c"]]

    def test_level_is_longest_path(self) -> None:
        # c is one edge from a but two edges from b's chain
        result = _levels({"a": ["c"], "b": ["x"], "x": ["c"], "c": []})
        assert result == [["a", "b"], ["x"], ["c"]]

    def test_cycle_leaves_nodes_unplaced(self) -> None:
        assert _levels({"a": ["b"], "b": ["a"]}) == []

    def test_self_loop_leaves_node_unplaced(self) -> None:
        assert _levels({"a": ["a"]}) == []

    def test_nodes_behind_cycle_are_unplaced(self) -> None:
        result = _levels({"x": [], "a": ["b"], "b": ["a", "c"], "c": []})
        assert result == [["x"]]

    def test_works_with_integers(self) -> None:
        assert _levels({1: [2], 2: [3], 3: []}) == [[1], [2], [3]]

    def test_works_with_tuples(self) -> None:
        assert _levels({("a", 1): [("b", 2)], ("b", 2): []}) == [[("a", 1)], [("b", 2)]]


class TestFindCycles:
    """Tests for depth-first cycle enumeration."""

    def test_acyclic_graph(self) -> None:
        assert _cycles({"a": ["b"], "b": ["c"], "c": []}) == []

    def test_self_loop(self) -> None:
        assert _cycles({"a": ["a"]}) == [["a", "a"]]

    def test_two_node_cycle(self) -> None:
        assert _cycles({"a": ["b"], "b": ["a"]}) == [["a", "b", "a"]]

    def test_longer_cycle(self) -> None:
        assert _cycles({"a": ["b"], "b": ["c"], "c": ["a"]}) == [["a", "b", "c", "a"]]

    def test_path_from_root_is_included(self) -> None:
        # The cycle b <-> c is entered from a
        assert _cycles({"a": ["b"], "b": ["c"], "c": ["b"]}) == [["a", "b", "c", "b"]]

    def test_disjoint_cycles(self) -> None:
        result = _cycles({"a": ["b"], "b": ["a"], "c": ["d"], "d": ["c"]})
        assert result == [["a", "b", "a"], ["c", "d", "c"]]

    def test_overlapping_cycles_share_nodes(self) -> None:
        result = _cycles({"a": ["b"], "b": ["c", "a"], "c": ["a"]})
        assert result == [["a", "b", "c", "a"], ["a", "b", "a"]]

    def test_finished_node_is_not_walked_again(self) -> None:
        # d is fully explored from b; reaching it again from c adds nothing
        result = _cycles({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []})
        assert result == []

    def test_deep_chain_does_not_recurse(self) -> None:
        size = 5000
        successors = {i: [i + 1] for i in range(size)}
        successors[size] = [0]
        result = _cycles(successors)
        assert len(result) == 1
        assert result[0][0] == 0
        assert result[0][-1] == 0
        assert len(result[0]) == size + 2
