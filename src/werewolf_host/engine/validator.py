"""MatchValidator - runtime validation hooks for match invariants.

Hooks are called by the engine every time it publishes a new state.

Usage:
    # In tests or development
    validator = CollectingValidator()
    engine = WerewolfEngine(sink, scheduler, authority_id="p1", validator=validator)
    violations = validator.get_violations()

    # No overhead in production (validator=None)
    engine = WerewolfEngine(sink, scheduler, authority_id="p1")
"""

from typing import Optional, Protocol

from werewolf_host.engine.match_state import MatchState


class MatchValidator(Protocol):
    """Hooks for runtime validation at key match points."""

    def on_match_start(self, state: MatchState) -> None:
        """Called once the roles have been dealt."""
        ...

    def on_state_published(self, state: MatchState) -> None:
        """Called every time the engine broadcasts a state."""
        ...

    def on_match_end(self, state: MatchState) -> list:
        """Called when the match reaches END. Returns all violations found."""
        ...


class NoOpValidator:
    """No-op validator for production use."""

    def on_match_start(self, state: MatchState) -> None:
        pass

    def on_state_published(self, state: MatchState) -> None:
        pass

    def on_match_end(self, state: MatchState) -> list:
        return []


class CollectingValidator(NoOpValidator):
    """Records every violation seen while a match is played.

    Keeps a copy of the last published state so that transition rules
    (no resurrection, append-only death log, ...) can be checked.
    The validation package is imported lazily since it depends on engine models.
    """

    def __init__(self):
        self._violations = []
        self._previous: Optional[MatchState] = None

    def get_violations(self):
        """Get all collected violations."""
        return list(self._violations)

    def clear(self):
        """Clear collected violations."""
        self._violations.clear()
        self._previous = None

    def on_match_start(self, state: MatchState) -> None:
        from werewolf_host.validation import validate_state
        self._previous = None
        self._violations.extend(validate_state(state))
        self._previous = state.model_copy(deep=True)

    def on_state_published(self, state: MatchState) -> None:
        from werewolf_host.validation import validate_update
        self._violations.extend(self._check(validate_update(self._previous, state)))
        self._previous = state.model_copy(deep=True)

    def on_match_end(self, state: MatchState) -> list:
        return self.get_violations()

    def _check(self, violations: list) -> list:
        return violations


class StrictValidator(CollectingValidator):
    """Raises ValidationError on the first published state that breaks a rule."""

    def _check(self, violations: list) -> list:
        if violations:
            from werewolf_host.validation import ValidationError
            raise ValidationError(violations)
        return violations


def create_validator(collect: bool = False, strict: bool = False):
    """Pick a validator for the given flags.

    Args:
        collect: If True, returns CollectingValidator.
        strict: If True, returns StrictValidator (takes precedence).

    Returns:
        A MatchValidator implementation.
    """
    if strict:
        return StrictValidator()
    if collect:
        return CollectingValidator()
    return NoOpValidator()
