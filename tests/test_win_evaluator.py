"""Tests for WinEvaluator."""

import pytest

from werewolf_host.engine import MatchState, WinEvaluator
from werewolf_host.events import DeathCause, Winner
from werewolf_host.models import MatchConfig, RoleId


def make_state(roles: dict[str, RoleId], dead: tuple[str, ...] = ()) -> MatchState:
    state = MatchState.new_match(roles, MatchConfig())
    for player_id in dead:
        state.kill(player_id, DeathCause.WOLF_KILL)
    return state


class TestWinEvaluator:

    def test_no_winner_while_village_outnumbers(self):
        state = make_state({
            "a": RoleId.WOLF, "b": RoleId.VILLAGER, "c": RoleId.SEER, "d": RoleId.WITCH,
        })
        assert WinEvaluator().evaluate(state) is None

    def test_village_wins_when_wolves_gone(self):
        state = make_state(
            {"a": RoleId.WOLF, "b": RoleId.WOLF_LEADER, "c": RoleId.VILLAGER},
            dead=("a", "b"),
        )
        result = WinEvaluator().evaluate(state)
        assert result.winner == Winner.VILLAGE

    def test_wolves_win_on_equal_numbers(self):
        state = make_state({
            "a": RoleId.WOLF, "b": RoleId.WOLF, "c": RoleId.VILLAGER, "d": RoleId.VILLAGER,
        })
        result = WinEvaluator().evaluate(state)
        assert result.winner == Winner.WOLVES

    @pytest.mark.parametrize("independent", [RoleId.BOMBER, RoleId.KNIGHT, RoleId.HUNTER])
    def test_every_non_wolf_counts_against_wolves(self, independent):
        state = make_state({"a": RoleId.WOLF, "b": RoleId.VILLAGER, "c": independent})
        assert WinEvaluator().evaluate(state) is None
        state.kill("b", DeathCause.VOTED_OUT)
        assert WinEvaluator().evaluate(state).winner == Winner.WOLVES

    def test_empty_village_with_no_wolves_is_village_win(self):
        state = make_state({"a": RoleId.WOLF, "b": RoleId.VILLAGER}, dead=("a", "b"))
        assert WinEvaluator().evaluate(state).winner == Winner.VILLAGE

    def test_evaluation_does_not_mutate(self):
        state = make_state({"a": RoleId.WOLF, "b": RoleId.VILLAGER})
        before = state.to_snapshot()
        WinEvaluator().evaluate(state)
        assert state.to_snapshot() == before

    def test_surviving_bomber_does_not_block_village_win(self):
        state = make_state(
            {"a": RoleId.WOLF, "b": RoleId.BOMBER, "c": RoleId.VILLAGER},
            dead=("a",),
        )
        assert WinEvaluator().evaluate(state).winner == Winner.VILLAGE
