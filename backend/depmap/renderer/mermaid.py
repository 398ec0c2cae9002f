# backend/depmap/renderer/mermaid.py

from collections import defaultdict
from typing import Dict, Optional

from depmap.ir.graph_ir import DependencyGraph
from depmap.ir.wave_ir import WaveScheduleResult
from depmap.planning.criticality import classify

WAVE_COLORS = [
    "#48bb78",  # wave 1 - green
    "#4299e1",  # wave 2 - blue
    "#ed8936",  # wave 3 - orange
    "#9f7aea",  # wave 4 - purple
    "#f56565",  # wave 5 - red
    "#38b2ac",  # wave 6 - teal
    "#ecc94b",  # wave 7 - yellow
    "#ed64a6",  # wave 8 - pink
]

ROLE_SHAPES = {
    "database": ('[("', '")]'),
    "storage": ('[("', '")]'),
    "cache": ('(("', '"))'),
    "queue": ('[/"', '"/]'),
    "web": ('(["', '"])'),
    "cdn": ('(["', '"])'),
    "default": ('["', '"]'),
}


def wave_color(wave_number: int) -> str:
    return WAVE_COLORS[(wave_number - 1) % len(WAVE_COLORS)]


def _escape(text: str) -> str:
    return text.replace('"', "#quot;")


def _node_line(node_id: str, label: str) -> str:
    open_, close = ROLE_SHAPES.get(classify(label), ROLE_SHAPES["default"])
    return f"{node_id}{open_}{_escape(label)}{close}"


def render_dependency_mermaid(
    graph: DependencyGraph,
    schedule: Optional[WaveScheduleResult] = None,
) -> str:
    """
    Dependency graph as a Mermaid flowchart.

    With a schedule, nodes are grouped in one subgraph per wave and filled
    with the wave colour.
    """
    lines = ["flowchart LR"]

    # server names carry dots/dashes/spaces: use positional ids
    ids: Dict[str, str] = {node.id: f"n{i}" for i, node in enumerate(graph.nodes)}

    if schedule:
        members = defaultdict(list)
        unscheduled = []
        for node in graph.nodes:
            wave = schedule.assignments.get(node.id)
            if wave is None:
                unscheduled.append(node)
            else:
                members[wave].append(node)

        for wave in sorted(members):
            lines.append(f'subgraph wave{wave}["Wave {wave}"]')
            for node in members[wave]:
                lines.append(f"  {_node_line(ids[node.id], node.label)}")
            lines.append("end")

        for node in unscheduled:
            lines.append(_node_line(ids[node.id], node.label))

        for wave in sorted(members):
            for node in members[wave]:
                lines.append(f"style {ids[node.id]} fill:{wave_color(wave)}")
    else:
        for node in graph.nodes:
            lines.append(_node_line(ids[node.id], node.label))

    for edge in graph.edges:
        lines.append(f"{ids[edge.from_id]} -->|{_escape(edge.label)}| {ids[edge.to_id]}")

    return "\n".join(lines)
