"""State invariants checked between consecutive MatchState snapshots.

Rules:
- S.1: alive keys match the dealt roles
- S.2: roles never change once dealt
- S.3: dead players never come back
- S.4: the death log only grows and never rewrites a cause
- S.5: witch potion flags only go from unused to used
- S.6: the knight's duel flag only goes from unused to used
- N.1: a finalized wolf target does not change within a night
- V.1: during a vote, locks are held by living players with a selection
- E.1: END carries a winner, and a winner implies END
- E.2: nothing changes once the match has ended
"""

from typing import Optional

from werewolf_host.engine.match_state import MatchState
from werewolf_host.events.match_events import Phase
from .types import ValidationViolation


def _violation(rule_id: str, category: str, message: str, **context) -> ValidationViolation:
    return ValidationViolation(
        rule_id=rule_id,
        category=category,
        message=message,
        context=context or None,
    )


def validate_state(state: MatchState) -> list[ValidationViolation]:
    """Checks that need only the current state."""
    violations = []

    if set(state.alive) != set(state.roles):
        violations.append(_violation(
            "S.1", "State Consistency",
            "alive players do not match dealt roles",
            alive=sorted(state.alive), roles=sorted(state.roles),
        ))

    locks = state.day.vote_locked if state.phase == Phase.VOTE else set()
    for voter in sorted(locks):
        if not state.is_alive(voter):
            violations.append(_violation(
                "V.1", "Voting", f"dead player {voter} holds a vote lock", voter=voter,
            ))
        elif voter not in state.day.votes:
            violations.append(_violation(
                "V.1", "Voting", f"player {voter} locked without a selection", voter=voter,
            ))

    if (state.phase == Phase.END) != (state.winner is not None):
        violations.append(_violation(
            "E.1", "Victory",
            f"phase {state.phase.value} with winner {state.winner}",
        ))

    return violations


def validate_transition(previous: MatchState, current: MatchState) -> list[ValidationViolation]:
    """Checks comparing a state with the one published before it."""
    violations = []

    if previous.roles != current.roles:
        violations.append(_violation("S.2", "State Consistency", "roles changed after dealing"))

    for player_id, was_alive in previous.alive.items():
        if not was_alive and current.alive.get(player_id):
            violations.append(_violation(
                "S.3", "State Consistency", f"player {player_id} came back to life",
                player=player_id,
            ))

    for player_id, cause in previous.death_log.items():
        if current.death_log.get(player_id) != cause:
            violations.append(_violation(
                "S.4", "State Consistency", f"death log entry for {player_id} was rewritten",
                player=player_id,
            ))

    for flag in ("witch_antidote_used", "witch_poison_used"):
        if getattr(previous, flag) and not getattr(current, flag):
            violations.append(_violation("S.5", "Night Actions - Witch", f"{flag} was reset"))

    if previous.knight_used and not current.knight_used:
        violations.append(_violation("S.6", "Day Actions - Knight", "knight duel was restored"))

    if (
        previous.round == current.round
        and previous.phase == Phase.NIGHT
        and current.phase == Phase.NIGHT
        and previous.night.wolf_confirmed
        and previous.night.wolf_target != current.night.wolf_target
    ):
        violations.append(_violation(
            "N.1", "Night Actions - Wolves", "finalized wolf target changed",
            before=previous.night.wolf_target, after=current.night.wolf_target,
        ))

    if previous.phase == Phase.END and current != previous:
        violations.append(_violation("E.2", "Victory", "state changed after the match ended"))

    return violations


def validate_update(
    previous: Optional[MatchState],
    current: MatchState,
) -> list[ValidationViolation]:
    """Run every check for one published state, stamped with where it happened."""
    violations = validate_state(current)
    if previous is not None:
        violations.extend(validate_transition(previous, current))
    for violation in violations:
        violation.round = current.round
        violation.phase = current.phase.value
    return violations
