from dataclasses import dataclass, field
from typing import List, Optional

from depmap.extraction.extractor import ExtractionResult, Sheets
from depmap.ir.errors import ValidationError
from depmap.ir.graph_ir import DependencyGraph
from depmap.ir.wave_ir import WaveScheduleResult


@dataclass
class PipelineContext:
    # Raw input (authoritative)
    sheets: Sheets

    extraction: Optional[ExtractionResult] = None
    graph: Optional[DependencyGraph] = None
    schedule: Optional[WaveScheduleResult] = None

    errors: List[ValidationError] = field(default_factory=list)

    @property
    def records(self) -> list:
        return self.extraction.records if self.extraction else []

    @property
    def ok(self) -> bool:
        return not self.errors

    def error_messages(self) -> List[str]:
        return [e.message for e in self.errors]
