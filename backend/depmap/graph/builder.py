# backend/depmap/graph/builder.py

from typing import Dict, Iterable, Mapping, Set

from depmap.ir.dependency_ir import DependencyRecord
from depmap.ir.graph_ir import DependencyGraph, GraphEdge, GraphNode


def build_graph(records: Iterable[DependencyRecord]) -> DependencyGraph:
    """
    Records -> node/edge graph.

    Deterministic:
    - nodes in first-occurrence order, `group` from the record that
      introduced the node
    - one edge per record, same order, self-loops kept
    """
    nodes: Dict[str, GraphNode] = {}
    edges = []

    for rec in records:
        if rec.source not in nodes:
            nodes[rec.source] = GraphNode(
                id=rec.source,
                label=rec.source,
                group=rec.source_app,
            )

        if rec.destination not in nodes:
            nodes[rec.destination] = GraphNode(
                id=rec.destination,
                label=rec.destination,
                group=rec.destination_app,
            )

        edges.append(
            GraphEdge(
                from_id=rec.source,
                to_id=rec.destination,
                protocol=rec.protocol,
                port=rec.port,
                service_name=rec.service_name,
            )
        )

    return DependencyGraph(nodes=list(nodes.values()), edges=edges)


def servers_of(records: Iterable[DependencyRecord]) -> list:
    """Distinct server names in first-occurrence order."""
    seen: Dict[str, None] = {}
    for rec in records:
        seen.setdefault(rec.source)
        seen.setdefault(rec.destination)
    return list(seen)


def dependency_map(records: Iterable[DependencyRecord]) -> Dict[str, Set[str]]:
    """
    server -> servers it depends on (each flow `a -> b` means a needs b).

    Every server gets an entry. A server never depends on itself.
    """
    deps: Dict[str, Set[str]] = {}

    for rec in records:
        deps.setdefault(rec.source, set())
        deps.setdefault(rec.destination, set())
        if rec.source != rec.destination:
            deps[rec.source].add(rec.destination)

    return deps


def dependents_count(server: str, deps: Mapping[str, Set[str]]) -> int:
    return sum(
        1 for other, targets in deps.items()
        if other != server and server in targets
    )
