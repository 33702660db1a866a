"""Validation records produced by the match invariant checks."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationViolation(BaseModel):
    """One broken invariant, located in the published state that broke it."""

    rule_id: str  # e.g. "S.3", "V.1"
    category: str  # e.g. "State Consistency", "Voting"
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    round: Optional[int] = None
    phase: Optional[str] = None
    context: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        where = f" (round {self.round}, {self.phase})" if self.phase else ""
        return f"[{self.severity.value.upper()}] {self.rule_id}: {self.message}{where}"
