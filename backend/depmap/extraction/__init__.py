from depmap.extraction.extractor import ExtractionResult, extract, parse_dependency_row
from depmap.extraction.columns import FIELD_ALIASES, first_matching_value
from depmap.extraction.ports import parse_port, recover_port

__all__ = [
    "ExtractionResult",
    "extract",
    "parse_dependency_row",
    "FIELD_ALIASES",
    "first_matching_value",
    "parse_port",
    "recover_port",
]
