"""Tests for graph building and the dependency query engine"""

from depmap.graph import build_graph, dependency_map, dependents_count, search, transitive_records
from depmap.graph.query import find_server
from depmap.ir import DependencyGraph, DependencyRecord, GraphEdge, GraphNode


def make_record(source: str, target: str, port: int = None, **kwargs) -> DependencyRecord:
    return DependencyRecord(source=source, destination=target, port=port, **kwargs)


def chain(*names) -> list:
    return [make_record(a, b) for a, b in zip(names, names[1:])]


# -------------------------
# Graph Builder
# -------------------------

def test_nodes_in_first_occurrence_order():
    records = [
        make_record("web-01", "api-01", 443, source_app="Shop", destination_app="Shop API"),
        make_record("api-01", "db-01", 5432, destination_app="Shop DB"),
        make_record("batch-01", "db-01", 5432, source_app="Batch", destination_app="Other"),
    ]

    graph = build_graph(records)

    assert graph.node_ids() == ["web-01", "api-01", "db-01", "batch-01"]
    # group comes from the record that introduced the node
    groups = {node.id: node.group for node in graph.nodes}
    assert groups == {
        "web-01": "Shop",
        "api-01": "Shop API",
        "db-01": "Shop DB",
        "batch-01": "Batch",
    }
    assert [edge.label for edge in graph.edges] == ["TCP:443", "TCP:5432", "TCP:5432"]
    assert graph.incoming_counts()["db-01"] == 2
    assert graph.validate().is_valid


def test_one_edge_per_record_and_self_loops_kept():
    records = [
        make_record("a", "b", 80),
        make_record("a", "b", 80),
        make_record("c", "c", 9000),
    ]

    graph = build_graph(records)

    assert len(graph.edges) == 3
    assert graph.node_ids() == ["a", "b", "c"]
    assert graph.edges[2].from_id == graph.edges[2].to_id == "c"


def test_graph_is_deterministic():
    records = chain("a", "b", "c") + [make_record("c", "a", 22)]

    assert build_graph(records).to_dict() == build_graph(list(records)).to_dict()


def test_empty_graph():
    graph = build_graph([])

    assert graph.nodes == []
    assert graph.edges == []


def test_validate_flags_dangling_edges():
    graph = DependencyGraph(
        nodes=[GraphNode(id="a", label="a"), GraphNode(id="a", label="a again")],
        edges=[GraphEdge(from_id="a", to_id="ghost", protocol="TCP")],
    )

    result = graph.validate()

    assert not result.is_valid
    assert "duplicate node ids" in result.messages()
    assert "edge target is not a node" in result.messages()


def test_dependency_map_ignores_self_dependency():
    deps = dependency_map([make_record("a", "b"), make_record("b", "b"), make_record("c", "b")])

    assert deps == {"a": {"b"}, "b": set(), "c": {"b"}}
    assert dependents_count("b", deps) == 2
    assert dependents_count("a", deps) == 0


# -------------------------
# Query Engine
# -------------------------

def test_search_direct_dependencies():
    records = [
        make_record("web-01", "db-01", 5432, source_app="Shop", destination_app="Shop DB"),
        make_record("app-01", "db-01", 5432, source_app="Billing"),
        make_record("db-01", "backup-01", 22),
    ]

    result = search(records, "DB-0")

    assert result.server == "db-01"
    assert [r.source for r in result.incoming] == ["web-01", "app-01"]
    assert [r.destination for r in result.outgoing] == ["backup-01"]
    assert result.related_servers == ["web-01", "app-01", "backup-01"]
    assert result.related_applications == ["Shop", "Shop DB", "Billing"]
    assert len(result.graph.edges) == 3

    payload = result.to_dict()
    assert payload["dependencies"]["incoming"][0]["source"] == "web-01"
    assert payload["relatedServers"] == ["web-01", "app-01", "backup-01"]


def test_search_not_found():
    records = chain("a-host", "b-host")

    assert search(records, "zzz") is None
    assert search(records, "   ") is None
    assert find_server(records, "") is None


def test_ambiguous_term_takes_first_match():
    records = chain("web-02", "web-01")

    assert find_server(records, "web") == "web-02"


def test_closure_is_bounded_to_two_hops():
    records = chain("A", "B", "C", "D", "E")

    result = search(records, "A")

    assert result.graph.node_ids() == ["A", "B", "C"]
    assert len(result.graph.edges) == 2


def test_closure_walks_both_directions():
    records = chain("A", "B", "C", "D", "E")

    result = search(records, "C")

    assert result.graph.node_ids() == ["A", "B", "C", "D", "E"]
    assert [r.source for r in result.incoming] == ["B"]
    assert [r.destination for r in result.outgoing] == ["D"]


def test_closure_depth_parameter():
    records = chain("A", "B", "C", "D", "E")

    assert transitive_records(records, "A", max_depth=0) == []
    assert len(transitive_records(records, "A", max_depth=1)) == 1
    assert len(transitive_records(records, "A", max_depth=10)) == 4


def test_closure_terminates_on_cycles_and_self_loops():
    records = chain("A", "B", "C", "A") + [make_record("B", "B", 7)]

    closure = transitive_records(records, "a", max_depth=5)

    assert closure == records


if __name__ == "__main__":
    test_nodes_in_first_occurrence_order()
    test_one_edge_per_record_and_self_loops_kept()
    test_graph_is_deterministic()
    test_empty_graph()
    test_validate_flags_dangling_edges()
    test_dependency_map_ignores_self_dependency()
    test_search_direct_dependencies()
    test_search_not_found()
    test_ambiguous_term_takes_first_match()
    test_closure_is_bounded_to_two_hops()
    test_closure_walks_both_directions()
    test_closure_depth_parameter()
    test_closure_terminates_on_cycles_and_self_loops()
    print("✅ Graph tests complete!")
