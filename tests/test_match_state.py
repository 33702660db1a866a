"""Tests for MatchState."""

import json

from werewolf_host.engine import MatchState
from werewolf_host.events import ABSTAIN, DeathCause, Phase, SeerResult
from werewolf_host.models import MatchConfig, RoleId


def make_state(**overrides) -> MatchState:
    roles = {
        "p1": RoleId.VILLAGER,
        "p2": RoleId.WOLF,
        "p3": RoleId.WOLF_LEADER,
        "p4": RoleId.SEER,
        "p5": RoleId.WITCH,
        "p6": RoleId.HUNTER,
        "p7": RoleId.KNIGHT,
        "p8": RoleId.BOMBER,
    }
    state = MatchState.new_match(roles, MatchConfig(night_time=15))
    for key, value in overrides.items():
        setattr(state, key, value)
    return state


class TestMatchStateCreation:

    def test_new_match(self):
        state = make_state()
        assert state.phase == Phase.ROLE_REVEAL
        assert state.round == 0
        assert set(state.alive) == set(state.roles)
        assert all(state.alive.values())
        assert state.death_log == {}
        assert state.winner is None
        assert state.special_pending is None

    def test_instances_do_not_share_working_state(self):
        first = make_state()
        second = make_state()
        first.night.confirmed.add("p1")
        first.day.votes["p1"] = "p2"
        assert second.night.confirmed == set()
        assert second.day.votes == {}


class TestMatchStateQueries:

    def test_alive_players_in_dealing_order(self):
        state = make_state()
        state.alive["p3"] = False
        assert state.alive_players() == ["p1", "p2", "p4", "p5", "p6", "p7", "p8"]

    def test_wolves_and_non_wolves(self):
        state = make_state()
        assert state.alive_wolves() == ["p2", "p3"]
        assert "p8" in state.alive_non_wolves()
        assert len(state.alive_non_wolves()) == 6

    def test_night_actors(self):
        state = make_state()
        assert state.night_actors() == ["p2", "p3", "p4", "p5", "p6"]

    def test_has_role_requires_alive(self):
        state = make_state()
        assert state.has_role("p4", RoleId.SEER)
        state.kill("p4", DeathCause.WOLF_KILL)
        assert not state.has_role("p4", RoleId.SEER)

    def test_unknown_player(self):
        state = make_state()
        assert not state.is_alive("nobody")
        assert not state.is_alive(None)
        assert state.role_of("nobody") is None


class TestKill:

    def test_kill_records_cause(self):
        state = make_state()
        assert state.kill("p1", DeathCause.VOTED_OUT) is True
        assert state.alive["p1"] is False
        assert state.death_log == {"p1": DeathCause.VOTED_OUT}

    def test_killing_dead_player_is_noop(self):
        state = make_state()
        state.kill("p1", DeathCause.WOLF_KILL)
        assert state.kill("p1", DeathCause.POISON) is False
        assert state.death_log["p1"] == DeathCause.WOLF_KILL

    def test_killing_unknown_player_is_noop(self):
        state = make_state()
        assert state.kill("ghost", DeathCause.POISON) is False
        assert "ghost" not in state.alive


class TestBeginNight:

    def test_resets_working_state_and_keeps_history(self):
        state = make_state()
        state.night.wolf_target = "p1"
        state.night.hunter_locks = {"p6": "p2"}
        state.day.votes = {"p1": ABSTAIN}
        state.seer_results = {"p4": {"p2": SeerResult.BAD}}
        state.witch_antidote_used = True
        state.kill("p7", DeathCause.LOST_DUEL)

        state.begin_night()

        assert state.round == 1
        assert state.night.wolf_target is None
        assert state.night.hunter_locks == {}
        assert state.night.time_left == 15
        assert state.day.votes == {}
        assert state.seer_results == {"p4": {"p2": SeerResult.BAD}}
        assert state.witch_antidote_used is True
        assert state.death_log == {"p7": DeathCause.LOST_DUEL}


class TestSnapshots:
    """Snapshots are plain data and re-applying them changes nothing."""

    def populated_state(self) -> MatchState:
        state = make_state(phase=Phase.VOTE, round=2)
        state.night.wolf_votes = {"p2": "p1", "p3": "p1"}
        state.night.confirmed = {"p2", "p3"}
        state.night.hunter_locks = {"p6": "p3"}
        state.seer_results = {"p4": {"p3": SeerResult.BAD}}
        state.day.votes = {"p1": "p3", "p2": ABSTAIN}
        state.day.vote_locked = {"p2"}
        state.kill("p5", DeathCause.WOLF_KILL)
        return state

    def test_snapshot_is_json_serializable(self):
        snapshot = self.populated_state().to_snapshot()
        assert json.loads(json.dumps(snapshot)) == snapshot

    def test_round_trip(self):
        state = self.populated_state()
        restored = MatchState.from_snapshot(state.to_snapshot())
        assert restored == state
        assert restored.death_log["p5"] == DeathCause.WOLF_KILL
        assert restored.roles["p6"] == RoleId.HUNTER

    def test_reapplying_same_snapshot_is_idempotent(self):
        snapshot = self.populated_state().to_snapshot()
        first = MatchState.from_snapshot(snapshot)
        second = MatchState.from_snapshot(first.to_snapshot())
        assert first == second
        assert MatchState.from_snapshot(json.loads(json.dumps(snapshot))) == first
