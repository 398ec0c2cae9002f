# backend/depmap/graph/query.py
"""
Dependency Query Engine - "who talks to whom" for one server.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from depmap.config import CLOSURE_MAX_DEPTH
from depmap.graph.builder import build_graph, servers_of
from depmap.ir.dependency_ir import DependencyRecord
from depmap.ir.graph_ir import DependencyGraph


@dataclass
class SearchResult:
    server: str
    incoming: List[DependencyRecord] = field(default_factory=list)
    outgoing: List[DependencyRecord] = field(default_factory=list)
    related_servers: List[str] = field(default_factory=list)
    related_applications: List[str] = field(default_factory=list)
    graph: DependencyGraph = field(default_factory=DependencyGraph)

    def to_dict(self) -> dict:
        return {
            "server": self.server,
            "dependencies": {
                "incoming": [dep.to_dict() for dep in self.incoming],
                "outgoing": [dep.to_dict() for dep in self.outgoing],
            },
            "relatedServers": list(self.related_servers),
            "relatedApplications": list(self.related_applications),
            "graph": self.graph.to_dict(),
        }


def _incidence_index(records: Sequence[DependencyRecord]) -> Dict[str, List[int]]:
    """lower-cased server -> positions of the records touching it"""
    index: Dict[str, List[int]] = {}
    for pos, rec in enumerate(records):
        index.setdefault(rec.source.lower(), []).append(pos)
        if rec.destination.lower() != rec.source.lower():
            index.setdefault(rec.destination.lower(), []).append(pos)
    return index


def transitive_records(
    records: Sequence[DependencyRecord],
    start: str,
    max_depth: int = CLOSURE_MAX_DEPTH,
) -> List[DependencyRecord]:
    """
    Records reachable from `start` within `max_depth` hops, in either
    direction.

    Breadth-first; a server is expanded at most once, and only servers at
    depth < max_depth contribute their records. Result keeps input order.
    """
    index = _incidence_index(records)
    touched = set()
    visited = set()
    queue = deque([(start, 0)])

    while queue:
        server, depth = queue.popleft()
        key = server.lower()

        if key in visited:
            continue
        visited.add(key)

        if depth >= max_depth:
            continue

        for pos in index.get(key, []):
            touched.add(pos)
            rec = records[pos]
            neighbor = rec.destination if rec.source.lower() == key else rec.source
            if neighbor.lower() not in visited:
                queue.append((neighbor, depth + 1))

    return [records[pos] for pos in sorted(touched)]


def find_server(records: Sequence[DependencyRecord], term: str) -> Optional[str]:
    """
    First server (first-occurrence order) whose name contains `term`,
    case-insensitive. Ambiguous terms resolve to whichever matches first.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return None

    for server in servers_of(records):
        if needle in server.lower():
            return server
    return None


def search(
    records: Sequence[DependencyRecord],
    term: str,
    max_depth: int = CLOSURE_MAX_DEPTH,
) -> Optional[SearchResult]:
    """Returns None when no server name contains the term."""
    records = list(records)
    server = find_server(records, term)

    if server is None:
        print(f"[Query] No server matches '{term}'")
        return None

    key = server.lower()
    incoming = [rec for rec in records if rec.destination.lower() == key]
    outgoing = [rec for rec in records if rec.source.lower() == key]

    related: Dict[str, None] = {}
    for rec in incoming:
        related.setdefault(rec.source)
    for rec in outgoing:
        related.setdefault(rec.destination)

    applications: Dict[str, None] = {}
    for rec in incoming + outgoing:
        if rec.source_app:
            applications.setdefault(rec.source_app)
        if rec.destination_app:
            applications.setdefault(rec.destination_app)

    closure = transitive_records(records, server, max_depth=max_depth)

    print(
        f"[Query] '{term}' -> {server}: {len(incoming)} in, {len(outgoing)} out, "
        f"{len(closure)} records within {max_depth} hops"
    )

    return SearchResult(
        server=server,
        incoming=incoming,
        outgoing=outgoing,
        related_servers=[s for s in related if s.lower() != key],
        related_applications=list(applications),
        graph=build_graph(closure),
    )
