# Intermediate representation for dependency data
# Plain value types shared by extraction, graph, planning and the API layer

from depmap.ir.errors import ValidationError, ExtractionError
from depmap.ir.validation import ValidationResult
from depmap.ir.dependency_ir import DependencyRecord
from depmap.ir.graph_ir import GraphNode, GraphEdge, DependencyGraph
from depmap.ir.database_ir import DatabaseInfo
from depmap.ir.wave_ir import WaveGroup, WaveScheduleResult, SchedulerState

__all__ = [
    "ValidationError",
    "ExtractionError",
    "ValidationResult",
    "DependencyRecord",
    "GraphNode",
    "GraphEdge",
    "DependencyGraph",
    "DatabaseInfo",
    "WaveGroup",
    "WaveScheduleResult",
    "SchedulerState",
]
