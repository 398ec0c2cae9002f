from depmap.graph.builder import build_graph, dependency_map, dependents_count, servers_of
from depmap.graph.query import SearchResult, search, transitive_records

__all__ = [
    "build_graph",
    "dependency_map",
    "dependents_count",
    "servers_of",
    "SearchResult",
    "search",
    "transitive_records",
]
