from depmap.pipeline.stage import PipelineStage
from depmap.graph.builder import build_graph
from depmap.ir.validation import ValidationResult


class GraphStage(PipelineStage):
    name = "graph"

    def run(self, context) -> ValidationResult:
        context.graph = build_graph(context.records)
        print(
            f"[GraphStage] {len(context.graph.nodes)} server nodes, "
            f"{len(context.graph.edges)} edges"
        )
        return context.graph.validate()
