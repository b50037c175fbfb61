"""
Reachability Filter Tests
=========================

Bounded multi-source BFS and induced-subgraph extraction.
"""

import pytest

from jokbo.core import ReachabilityFilter

from tests.fixtures import PA, chain_dataset, create_dataset, create_edge, create_node


def create_filter(dataset) -> ReachabilityFilter:
    return ReachabilityFilter(dataset.index, dataset.graph)


def shown(view):
    return [node.node_id for node in view.nodes]


def shown_links(view):
    return [(link.source_id, link.target_id) for link in view.links]


class TestChainScenario:

    def test_one_hop_from_a(self):
        view = create_filter(chain_dataset()).filter(["A"], 1)

        assert shown(view) == ["A", "B"]
        assert shown_links(view) == [("A", "B")]

    def test_two_hops_from_a(self):
        view = create_filter(chain_dataset()).filter(["A"], 2)

        assert shown(view) == ["A", "B", "C"]
        assert shown_links(view) == [("A", "B"), ("B", "C")]

    def test_three_hops_reach_both_affiliation_links(self):
        view = create_filter(chain_dataset()).filter(["A"], 3)

        assert shown(view) == ["A", "B", "C", "D"]
        assert [link.position for link in view.links] == [0, 1, 2, 3]

    def test_isolated_node_never_appears_unless_seeded(self):
        reach = create_filter(chain_dataset())

        assert "E" not in shown(reach.filter(["A"], 10))
        assert shown(reach.filter(["E"], 3)) == ["E"]
        assert reach.filter(["E"], 3).links == ()


class TestSeeds:

    def test_empty_seed_set_gives_empty_view(self):
        view = create_filter(chain_dataset()).filter([], 5)

        assert view.is_empty
        assert view.links == ()

    def test_unknown_seeds_are_skipped(self):
        reach = create_filter(chain_dataset())

        assert shown(reach.filter(["ZZZ", "A"], 1)) == ["A", "B"]
        assert reach.filter(["ZZZ"], 1).is_empty

    def test_multi_source_distance_is_to_nearest_seed(self):
        distances = create_filter(chain_dataset()).distances(["A", "D"], 3)

        assert distances == {"A": 0, "D": 0, "B": 1, "C": 1}

    def test_duplicate_seeds_are_harmless(self):
        reach = create_filter(chain_dataset())

        assert reach.filter(["A", "A"], 2) == reach.filter(["A"], 2)

    def test_output_order_ignores_seed_order(self):
        reach = create_filter(chain_dataset())

        assert shown(reach.filter(["D", "A"], 1)) == ["A", "B", "C", "D"]


class TestBoundAndInducedLinks:

    def test_frontier_is_not_expanded(self):
        distances = create_filter(chain_dataset()).distances(["A"], 2)

        assert distances == {"A": 0, "B": 1, "C": 2}

    def test_induced_links_include_untraversed_edges(self):
        """A triangle link not on the BFS tree is still shown."""
        nodes = [create_node(n) for n in "STU"]
        edges = [create_edge("S", "T"), create_edge("S", "U"), create_edge("T", "U", PA)]
        view = create_filter(create_dataset(nodes, edges)).filter(["S"], 1)

        assert shown(view) == ["S", "T", "U"]
        assert [link.position for link in view.links] == [0, 1, 2]

    def test_links_leaving_the_view_are_dropped(self):
        view = create_filter(chain_dataset()).filter(["C"], 1)

        assert shown(view) == ["B", "C", "D"]
        assert ("A", "B") not in shown_links(view)

    def test_self_loop_is_kept_when_node_shown(self):
        nodes = [create_node("A"), create_node("B")]
        edges = [create_edge("A", "A", PA), create_edge("A", "B")]
        view = create_filter(create_dataset(nodes, edges)).filter(["A"], 1)

        assert [link.position for link in view.links] == [0, 1]

    def test_parallel_links_both_shown(self):
        nodes = [create_node("A"), create_node("B")]
        edges = [create_edge("A", "B"), create_edge("A", "B")]
        view = create_filter(create_dataset(nodes, edges)).filter(["A"], 1)

        assert [link.position for link in view.links] == [0, 1]

    @pytest.mark.parametrize("bad_bound", [0, -1, 1.5, "2", True, None])
    def test_invalid_hop_bound_raises(self, bad_bound):
        reach = create_filter(chain_dataset())

        with pytest.raises(ValueError):
            reach.filter(["A"], bad_bound)

    def test_large_bound_shows_whole_component(self):
        view = create_filter(chain_dataset()).filter(["A"], 1000)

        assert shown(view) == ["A", "B", "C", "D"]

    def test_same_input_same_view(self):
        reach = create_filter(chain_dataset())

        assert reach.filter(["A"], 2) == reach.filter(["A"], 2)
