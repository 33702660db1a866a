"""Full-match integration tests with stub bots."""

import pytest

from werewolf_host.bots import StubBot
from werewolf_host.engine import CollectingValidator, MatchState
from werewolf_host.events import Phase
from werewolf_host.models import MatchConfig, RoleId
from werewolf_host.simulation import make_player_ids, run_simulated_match


class TestSimulatedMatches:

    @pytest.mark.parametrize("seed", range(10))
    def test_match_ends_without_violations(self, seed):
        result = run_simulated_match(seed, validator=CollectingValidator())
        assert result.winner is not None
        assert result.violations == []
        assert result.log.winner == result.winner
        assert result.log.of_kind("match_end")

    @pytest.mark.parametrize("seed", range(5))
    def test_all_roles_in_play(self, seed):
        config = MatchConfig(roles={
            RoleId.WOLF: 1,
            RoleId.WOLF_LEADER: 1,
            RoleId.SEER: 1,
            RoleId.WITCH: 1,
            RoleId.HUNTER: 1,
            RoleId.KNIGHT: 1,
            RoleId.BOMBER: 1,
        })
        result = run_simulated_match(seed, player_count=10, config=config,
                                     validator=CollectingValidator())
        assert result.winner is not None
        assert result.violations == []

    def test_same_seed_same_outcome(self):
        first = run_simulated_match(3)
        second = run_simulated_match(3)
        assert first.winner == second.winner
        assert first.rounds == second.rounds
        assert first.snapshots == second.snapshots


class TestStubBot:

    def test_dead_bot_stays_quiet(self):
        state = MatchState.new_match({"p1": RoleId.VILLAGER, "p2": RoleId.WOLF}, MatchConfig())
        state.phase = Phase.NIGHT
        state.alive["p1"] = False
        bot = StubBot("p1", seed=0, activity=1.0)
        assert bot.decide(state.to_snapshot()) is None

    def test_passive_role_acknowledges_night(self):
        state = MatchState.new_match({"p1": RoleId.VILLAGER, "p2": RoleId.WOLF}, MatchConfig())
        state.phase = Phase.NIGHT
        bot = StubBot("p1", seed=0, activity=1.0)
        assert bot.decide(state.to_snapshot()) == {"kind": "night_done", "player_id": "p1"}

    def test_player_ids(self):
        assert make_player_ids(3) == ["p1", "p2", "p3"]
