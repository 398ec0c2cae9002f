from depmap.pipeline.context import PipelineContext
from depmap.pipeline.extraction_stage import ExtractionStage
from depmap.pipeline.graph_stage import GraphStage
from depmap.pipeline.scheduling_stage import SchedulingStage
from depmap.extraction.extractor import Sheets


class PipelineController:
    def __init__(self):
        # Core stages (always run)
        self.core_stages = [
            ExtractionStage(),
            GraphStage(),
        ]

        # Optional stages
        self.scheduling_stage = SchedulingStage()

    def run(self, sheets: Sheets, schedule: bool = True) -> PipelineContext:
        context = PipelineContext(sheets=sheets)

        stages = list(self.core_stages)
        if schedule:
            stages.append(self.scheduling_stage)

        for stage in stages:
            result = stage.execute(context)

            # -------------------------------------------------
            # Hard stop on failure
            # -------------------------------------------------
            if not result.is_valid:
                print(f"[Pipeline] Stage '{stage.name}' failed: {result.messages()}")
                context.errors.extend(result.errors)
                break

        return context
