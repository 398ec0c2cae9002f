from dataclasses import dataclass, field
from typing import List

from .errors import ValidationError


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failure(cls, errors: List[ValidationError]) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors))

    @classmethod
    def from_errors(cls, errors: List[ValidationError]) -> "ValidationResult":
        """Success when `errors` is empty, failure otherwise."""
        return cls.failure(errors) if errors else cls.success()

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]
