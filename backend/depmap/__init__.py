"""
depmap - dependency map and migration wave planner.

Library entry points:
    extract(sheets)          -> ExtractionResult   (raises ExtractionError)
    build_graph(records)     -> DependencyGraph
    search(records, term)    -> SearchResult | None
    schedule_waves(records)  -> WaveScheduleResult
"""

__version__ = "0.3.0"
