from dataclasses import dataclass


@dataclass
class ValidationError:
    level: str
    message: str
    object_id: str

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "message": self.message,
            "objectId": self.object_id,
        }


class ExtractionError(ValueError):
    """
    Raised when no sheet in the input yields a single valid dependency record.

    Individual malformed rows never raise; only the "nothing usable at all"
    case reaches the caller.
    """

    def __init__(self, message: str, sheets_scanned: int = 0):
        super().__init__(message)
        self.sheets_scanned = sheets_scanned
