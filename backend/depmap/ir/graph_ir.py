from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import ValidationError
from .validation import ValidationResult


@dataclass(frozen=True)
class GraphNode:
    id: str
    label: str
    group: Optional[str] = None             # application that introduced the node
    node_type: str = "server"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.node_type,
            "group": self.group,
        }


@dataclass(frozen=True)
class GraphEdge:
    from_id: str
    to_id: str
    protocol: str
    port: Optional[int] = None
    service_name: Optional[str] = None

    @property
    def label(self) -> str:
        if self.port is None:
            return self.protocol
        return f"{self.protocol}:{self.port}"

    def to_dict(self) -> dict:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "label": self.label,
            "port": self.port,
            "protocol": self.protocol,
            "serviceName": self.service_name,
        }


@dataclass
class DependencyGraph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def incoming_counts(self) -> Dict[str, int]:
        return dict(Counter(edge.to_id for edge in self.edges))

    def validate(self) -> ValidationResult:
        errors = []
        node_ids = set(self.node_ids())

        if len(node_ids) != len(self.nodes):
            errors.append(
                ValidationError(
                    level="graph",
                    message="duplicate node ids",
                    object_id="nodes",
                )
            )

        for edge in self.edges:
            if edge.from_id not in node_ids:
                errors.append(
                    ValidationError(
                        level="graph",
                        message="edge source is not a node",
                        object_id=edge.from_id,
                    )
                )
            if edge.to_id not in node_ids:
                errors.append(
                    ValidationError(
                        level="graph",
                        message="edge target is not a node",
                        object_id=edge.to_id,
                    )
                )

        return ValidationResult.from_errors(errors)

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
