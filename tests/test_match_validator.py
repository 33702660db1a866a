"""Tests for the runtime invariant validators."""

import pytest

from werewolf_host.engine import (
    CollectingValidator,
    MatchState,
    NoOpValidator,
    StrictValidator,
    create_validator,
)
from werewolf_host.events import DeathCause, Phase, Winner
from werewolf_host.models import MatchConfig, RoleId
from werewolf_host.validation import (
    ValidationError,
    validate_state,
    validate_transition,
)


def make_state() -> MatchState:
    return MatchState.new_match(
        {"a": RoleId.WOLF, "b": RoleId.VILLAGER, "c": RoleId.WITCH},
        MatchConfig(),
    )


def rule_ids(violations) -> set[str]:
    return {v.rule_id for v in violations}


class TestStateRules:

    def test_fresh_state_is_valid(self):
        assert validate_state(make_state()) == []

    def test_vote_lock_without_selection(self):
        state = make_state()
        state.phase = Phase.VOTE
        state.day.vote_locked = {"b"}
        assert rule_ids(validate_state(state)) == {"V.1"}

    def test_end_requires_winner(self):
        state = make_state()
        state.phase = Phase.END
        assert rule_ids(validate_state(state)) == {"E.1"}
        state.winner = Winner.VILLAGE
        assert validate_state(state) == []


class TestTransitionRules:

    def test_resurrection(self):
        before = make_state()
        before.kill("b", DeathCause.WOLF_KILL)
        after = before.model_copy(deep=True)
        after.alive["b"] = True
        assert "S.3" in rule_ids(validate_transition(before, after))

    def test_death_cause_rewritten(self):
        before = make_state()
        before.kill("b", DeathCause.WOLF_KILL)
        after = before.model_copy(deep=True)
        after.death_log["b"] = DeathCause.POISON
        assert rule_ids(validate_transition(before, after)) == {"S.4"}

    def test_potion_restored(self):
        before = make_state()
        before.witch_poison_used = True
        after = before.model_copy(deep=True)
        after.witch_poison_used = False
        assert rule_ids(validate_transition(before, after)) == {"S.5"}

    def test_finalized_wolf_target_changed(self):
        before = make_state()
        before.phase = Phase.NIGHT
        before.night.wolf_target = "b"
        before.night.wolf_confirmed = True
        after = before.model_copy(deep=True)
        after.night.wolf_target = "c"
        assert rule_ids(validate_transition(before, after)) == {"N.1"}

    def test_change_after_end(self):
        before = make_state()
        before.phase = Phase.END
        before.winner = Winner.WOLVES
        after = before.model_copy(deep=True)
        after.round = 5
        assert rule_ids(validate_transition(before, after)) == {"E.2"}


class TestValidators:

    def test_factory(self):
        assert isinstance(create_validator(), NoOpValidator)
        assert isinstance(create_validator(collect=True), CollectingValidator)
        assert isinstance(create_validator(collect=True, strict=True), StrictValidator)

    def test_collecting_validator_tracks_transitions(self):
        validator = CollectingValidator()
        state = make_state()
        validator.on_match_start(state)
        state.kill("b", DeathCause.WOLF_KILL)
        validator.on_state_published(state)
        state.alive["b"] = True
        validator.on_state_published(state)

        assert rule_ids(validator.on_match_end(state)) == {"S.3"}
        validator.clear()
        assert validator.get_violations() == []

    def test_strict_validator_raises(self):
        validator = StrictValidator()
        state = make_state()
        validator.on_match_start(state)
        state.roles["a"] = RoleId.VILLAGER
        with pytest.raises(ValidationError) as excinfo:
            validator.on_state_published(state)
        assert "S.2" in str(excinfo.value)
