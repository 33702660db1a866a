"""Validation exceptions."""

from .types import ValidationViolation


class ValidationError(Exception):
    """Raised by StrictValidator as soon as a published state breaks a rule."""

    def __init__(self, violations: list[ValidationViolation]):
        self.violations = violations
        rules = ", ".join(sorted({v.rule_id for v in violations})) or "none"
        super().__init__(f"{len(violations)} match invariant violation(s): {rules}")

    def __str__(self) -> str:
        lines = [self.args[0]]
        lines.extend(f"  {v}" for v in self.violations)
        return "\n".join(lines)
