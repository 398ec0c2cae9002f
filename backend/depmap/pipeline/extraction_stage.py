from depmap.pipeline.stage import PipelineStage
from depmap.extraction.extractor import extract
from depmap.ir.errors import ExtractionError, ValidationError
from depmap.ir.validation import ValidationResult


class ExtractionStage(PipelineStage):
    name = "extraction"
    needs_records = False

    def run(self, context) -> ValidationResult:
        try:
            context.extraction = extract(context.sheets)
            return ValidationResult.success()
        except ExtractionError as e:
            context.extraction = None
            return ValidationResult.failure(
                [ValidationError(level="extraction", message=str(e), object_id="sheets")]
            )
