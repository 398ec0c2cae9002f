from depmap.pipeline.stage import PipelineStage
from depmap.planning.scheduler import schedule_waves
from depmap.ir.validation import ValidationResult


class SchedulingStage(PipelineStage):
    """
    Migration waves for the extracted records.

    Cannot fail on graph shape (cycles, self-loops, islands); the only
    failure upstream is an empty extraction.
    """

    name = "scheduling"

    def run(self, context) -> ValidationResult:
        context.schedule = schedule_waves(context.records)
        return ValidationResult.success()
