"""Runtime validation of match invariants.

Modules:
- types.py: ValidationViolation, ValidationSeverity
- exceptions.py: ValidationError
- invariants.py: state and transition checks
"""

from .types import ValidationSeverity, ValidationViolation
from .exceptions import ValidationError
from .invariants import validate_state, validate_transition, validate_update

__all__ = [
    "ValidationSeverity",
    "ValidationViolation",
    "ValidationError",
    "validate_state",
    "validate_transition",
    "validate_update",
]
