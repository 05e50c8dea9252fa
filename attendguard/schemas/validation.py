from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

from attendguard.schemas.errors import ErrorCategory


class ValidationResult(BaseModel):
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, warnings: Optional[List[str]] = None) -> "ValidationResult":
        return cls(is_valid=True, warnings=list(warnings or []))

    @classmethod
    def fail(cls, *errors: str) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors))

    def merge(self, *others: "ValidationResult") -> "ValidationResult":
        # agrega tudo: nenhum erro ou aviso é descartado
        errors = list(self.errors)
        warnings = list(self.warnings)
        for other in others:
            errors.extend(other.errors)
            warnings.extend(other.warnings)
        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


class GuardDecision(BaseModel):
    should_proceed: bool
    reason: str
    suggested_action: str
    warnings: List[str] = Field(default_factory=list)
    # categoria usada quando a decisão vira AppError
    category: ErrorCategory = ErrorCategory.validation
    code: str = "ADMISSION_DENIED"
