from abc import ABC, abstractmethod

from depmap.pipeline.context import PipelineContext
from depmap.ir.validation import ValidationResult


class PipelineStage(ABC):
    name: str

    # stages that work on extracted records are skipped when there are none
    needs_records: bool = True

    def execute(self, context: PipelineContext) -> ValidationResult:
        if self.needs_records and not context.extraction:
            print(f"[Pipeline] [DEBUG] Stage '{self.name}' skipped: no records")
            return ValidationResult.success()
        return self.run(context)

    @abstractmethod
    def run(self, context: PipelineContext) -> ValidationResult:
        """
        Reads the previous stages' output from the context and writes its
        own. Stages never call each other.
        """
