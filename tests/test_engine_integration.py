"""
Network Explorer Integration Tests
==================================

End-to-end flow through every layer:
document -> index -> topology -> selection -> filtered view.
"""

import json

import pytest

from jokbo import ExplorerConfig, NetworkExplorer
from jokbo.contracts import ErrorCode, LoadState
from jokbo.core import IndexConfig, SelectionConfig
from jokbo.engine import DEFAULT_DATASET_FILENAME, default_dataset_path

from tests.fixtures import chain_document


def create_explorer(key_figure_ids=("A", "D", "MISSING"), sink=None, **config):
    return NetworkExplorer(ExplorerConfig(key_figure_ids=key_figure_ids, **config), sink)


def shown(view):
    return [node.node_id for node in view.nodes]


class TestConfiguration:

    def test_defaults_are_filled(self, monkeypatch):
        monkeypatch.delenv("JOKBO_DATASET_PATH", raising=False)
        config = ExplorerConfig()

        assert config.ingestion is not None
        assert config.index.fail_fast_on_unresolved is False
        assert config.selection.max_hop_bound == 10
        assert config.dataset_path.endswith(DEFAULT_DATASET_FILENAME)

    def test_dataset_path_from_environment(self, monkeypatch):
        monkeypatch.setenv("JOKBO_DATASET_PATH", "/data/network.json")

        assert default_dataset_path() == "/data/network.json"
        assert ExplorerConfig().dataset_path == "/data/network.json"

    def test_key_figures_deduplicated_in_order(self):
        config = ExplorerConfig(key_figure_ids=["D", "A", "D"])

        assert config.key_figure_ids == ("D", "A")


class TestLoadLifecycle:

    def test_starts_loading_with_empty_view(self):
        explorer = create_explorer()

        assert explorer.load_state is LoadState.LOADING
        assert explorer.current_view.is_empty
        with pytest.raises(RuntimeError):
            explorer.dataset

    def test_successful_load(self):
        published = []
        explorer = create_explorer(sink=published.append)

        state = explorer.load_document(chain_document())

        assert state is LoadState.READY
        assert explorer.load_error is None
        assert explorer.dataset.clusters.cluster_count == 2
        assert len(published) == 1
        assert shown(explorer.current_view) == ["A", "B", "C", "D"]

    def test_key_figures_resolved_in_registry_order(self):
        explorer = create_explorer(key_figure_ids=("D", "MISSING", "A"))
        explorer.load_document(chain_document())

        dataset = explorer.dataset
        assert dataset.key_figure_ids == ("D", "MISSING", "A")
        assert [n.node_id for n in dataset.key_figures] == ["D", "A"]

    def test_absent_key_figure_is_a_harmless_seed(self):
        explorer = create_explorer(key_figure_ids=("MISSING",))
        explorer.load_document(chain_document())

        assert explorer.controller.state.active_figure_ids == frozenset({"MISSING"})
        assert explorer.current_view.is_empty

    def test_malformed_document_fails(self):
        explorer = create_explorer()

        state = explorer.load_document({"nodes": "broken"})

        assert state is LoadState.FAILED
        assert explorer.load_error.code == ErrorCode.MALFORMED_DATASET
        assert explorer.current_view.is_empty
        with pytest.raises(RuntimeError):
            explorer.controller

    def test_no_second_load(self):
        explorer = create_explorer()
        explorer.load_document({"nodes": "broken"})

        with pytest.raises(RuntimeError):
            explorer.load_document(chain_document())

    def test_load_from_configured_path(self, tmp_path):
        path = tmp_path / DEFAULT_DATASET_FILENAME
        path.write_text(json.dumps(chain_document(), ensure_ascii=False), encoding="utf-8")
        explorer = create_explorer(dataset_path=str(path))

        assert explorer.load() is LoadState.READY

    def test_missing_file_fails(self, tmp_path):
        explorer = create_explorer(dataset_path=str(tmp_path / "nope.json"))

        assert explorer.load() is LoadState.FAILED
        assert explorer.load_error.code == ErrorCode.DATASET_UNREADABLE


class TestWarnings:

    def test_rejected_edges_are_reported(self):
        document = chain_document()
        document["edges"].append({"source": "A", "target": "GHOST", "type": "PARENT_CHILD"})
        document["edges"].append({"source": "A", "target": "E", "type": "SIBLING"})
        explorer = create_explorer()

        explorer.load_document(document)

        codes = sorted(w.code.name for w in explorer.warnings)
        assert codes == ["UNKNOWN_RELATIONSHIP_KIND", "UNRESOLVED_EDGE_ENDPOINT"]
        assert explorer.dataset.index.link_count == 4


class TestSelectionFlow:

    def test_scenario_walkthrough(self):
        """Seed {A}: one hop shows A-B, two hops add C."""
        explorer = create_explorer(key_figure_ids=("A",))
        explorer.load_document(chain_document())
        controller = explorer.controller

        assert shown(explorer.current_view) == ["A", "B"]

        controller.set_hop_bound(2)
        assert shown(explorer.current_view) == ["A", "B", "C"]
        assert [(l.source_id, l.target_id) for l in explorer.current_view.links] == [
            ("A", "B"), ("B", "C")
        ]

        controller.toggle("A")
        assert explorer.current_view.is_empty


class TestAuditTrail:

    def test_unified_log_covers_all_layers(self):
        explorer = create_explorer()
        explorer.load_document(chain_document())
        explorer.controller.set_hop_bound(2)

        layers = {e.layer for e in explorer.get_audit_log()}
        assert layers == {"ingestion", "index", "topology", "filter", "selection", "engine"}

    def test_repeated_sync_does_not_duplicate(self):
        explorer = create_explorer()
        explorer.load_document(chain_document())

        first = explorer.get_audit_log()
        second = explorer.get_audit_log()

        assert len(first) == len(second)

    def test_layer_filter(self):
        explorer = create_explorer()
        explorer.load_document(chain_document())

        entries = explorer.get_audit_log(layers=["engine"])
        assert [e.action for e in entries] == ["load_ready"]

    def test_audit_report(self):
        explorer = create_explorer()
        explorer.load_document(chain_document())

        report = explorer.get_audit_report()
        assert report["total_entries"] == len(explorer.get_audit_log())
        assert report["by_layer"]["engine"] == 1


class TestLoadFailureAfterParsing:
    """Failures past the parse step still end in FAILED, never LOADING."""

    def dangling_document(self):
        document = chain_document()
        document["edges"].append({"source": "A", "target": "GHOST", "type": "PARENT_CHILD"})
        return document

    def test_fail_fast_index_ends_in_failed(self):
        explorer = create_explorer(index=IndexConfig(fail_fast_on_unresolved=True))

        state = explorer.load_document(self.dangling_document())

        assert state is LoadState.FAILED
        assert explorer.load_error.code == ErrorCode.UNRESOLVED_EDGE_ENDPOINT
        assert explorer.load_error.context_value("target") == "GHOST"
        assert explorer.current_view.is_empty
        with pytest.raises(RuntimeError):
            explorer.dataset

    def test_failed_load_is_not_retried(self):
        explorer = create_explorer(index=IndexConfig(fail_fast_on_unresolved=True))
        explorer.load_document(self.dangling_document())

        with pytest.raises(RuntimeError):
            explorer.load_document(chain_document())
        assert explorer.load_state is LoadState.FAILED

    def test_invalid_selection_config_ends_in_failed(self):
        explorer = create_explorer(selection=SelectionConfig(default_hop_bound=0))

        assert explorer.load_document(chain_document()) is LoadState.FAILED
        assert explorer.load_error.code == ErrorCode.INVALID_CONFIGURATION

    def test_failure_is_audited(self):
        explorer = create_explorer(index=IndexConfig(fail_fast_on_unresolved=True))
        explorer.load_document(self.dangling_document())

        entries = explorer.get_audit_log(layers=["engine"])
        assert [e.action for e in entries] == ["load_failed"]
        assert entries[0].metadata_value("code") == "UNRESOLVED_EDGE_ENDPOINT"


class TestRenderSinkFailure:

    def test_sink_error_surfaces_after_ready(self):
        def broken_sink(view):
            raise RuntimeError("canvas unavailable")

        explorer = create_explorer(sink=broken_sink)

        with pytest.raises(RuntimeError, match="canvas unavailable"):
            explorer.load_document(chain_document())

        assert explorer.load_state is LoadState.READY
        assert shown(explorer.current_view) == ["A", "B", "C", "D"]

    def test_sink_error_does_not_allow_second_load(self):
        def broken_sink(view):
            raise RuntimeError("canvas unavailable")

        explorer = create_explorer(sink=broken_sink)
        with pytest.raises(RuntimeError):
            explorer.load_document(chain_document())

        with pytest.raises(RuntimeError, match="already finished"):
            explorer.load_document(chain_document())

    def test_sink_receives_each_recompute(self):
        published = []
        explorer = create_explorer(key_figure_ids=("A",), sink=published.append)
        explorer.load_document(chain_document())

        explorer.controller.set_hop_bound(2)

        assert [shown(view) for view in published] == [["A", "B"], ["A", "B", "C"]]


class TestFourNodeScenario:
    """A-B (PC), B-C (PC), C-D (PA), D-C (PA) with no isolated node."""

    def load(self):
        document = chain_document()
        document["nodes"] = [n for n in document["nodes"] if n["id"] != "E"]
        explorer = create_explorer(key_figure_ids=("A",))
        explorer.load_document(document)
        return explorer

    def test_single_cluster(self):
        clusters = self.load().dataset.clusters

        assert clusters.cluster_count == 1
        assert clusters.clusters == (("A", "B", "C", "D"),)

    def test_affiliations_reciprocal(self):
        links = self.load().dataset.index.links

        assert [link.is_reciprocal for link in links] == [False, False, True, True]

    def test_hop_bounds(self):
        explorer = self.load()

        assert shown(explorer.current_view) == ["A", "B"]
        assert [l.position for l in explorer.current_view.links] == [0]

        explorer.controller.set_hop_bound(2)
        assert shown(explorer.current_view) == ["A", "B", "C"]
        assert [l.position for l in explorer.current_view.links] == [0, 1]
