"""Stub bots that play random legal moves.

Useful for:
- Full-match integration tests without human players
- Offline simulation from the command line

A StubBot reads the last broadcast snapshot, works out what its player may
do in the current phase, and returns a raw action payload the way the
transport layer would relay it. Bots are deliberately a little lazy (see
``activity``) so that countdowns and forced transitions get exercised too.
"""

import random
from typing import Any, Optional

from werewolf_host.engine.match_state import MatchState
from werewolf_host.events.actions import ABSTAIN, ActionKind
from werewolf_host.events.match_events import Phase
from werewolf_host.models.role import RoleId, get_role


class StubBot:
    """A bot controlling one player."""

    def __init__(self, player_id: str, seed: Optional[int] = None, activity: float = 0.8):
        self.player_id = player_id
        self.activity = activity
        self._rng = random.Random(seed)

    def decide(self, snapshot: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Pick an action payload for the current snapshot, or None to wait."""
        state = MatchState.from_snapshot(snapshot)
        if not state.is_alive(self.player_id) and state.phase != Phase.SPECIAL:
            return None
        if self._rng.random() > self.activity:
            return None

        if state.phase == Phase.NIGHT:
            return self._night(state)
        if state.phase == Phase.DAY_DISCUSS:
            return self._discuss(state)
        if state.phase == Phase.VOTE:
            return self._vote(state)
        if state.phase == Phase.SPECIAL:
            return self._special(state)
        return None

    def _action(self, kind: ActionKind, **fields: Any) -> dict[str, Any]:
        return {"kind": kind.value, "player_id": self.player_id, **fields}

    def _others(self, state: MatchState) -> list[str]:
        return [p for p in state.alive_players() if p != self.player_id]

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    def _night(self, state: MatchState) -> Optional[dict[str, Any]]:
        night = state.night
        if self.player_id in night.confirmed:
            return None

        role = state.roles[self.player_id]
        if role in (RoleId.WOLF, RoleId.WOLF_LEADER):
            prey = state.alive_non_wolves()
            if night.wolf_votes and self._rng.random() < 0.2:
                return self._action(ActionKind.WOLF_CONFIRM)
            if prey:
                return self._action(ActionKind.WOLF_VOTE, target=self._rng.choice(prey))
            return None

        if role == RoleId.SEER:
            checked = state.seer_results.get(self.player_id, {})
            unchecked = [p for p in self._others(state) if p not in checked]
            candidates = unchecked or self._others(state)
            if not candidates:
                return None
            return self._action(ActionKind.SEER_CHECK, target=self._rng.choice(candidates))

        if role == RoleId.WITCH:
            if (
                night.wolf_target is not None
                and not state.witch_antidote_used
                and not night.witch_save
                and self._rng.random() < 0.5
            ):
                return self._action(ActionKind.WITCH_SAVE)
            if (
                not state.witch_poison_used
                and night.witch_poison is None
                and self._rng.random() < 0.15
            ):
                return self._action(ActionKind.WITCH_POISON, target=self._rng.choice(state.alive_players()))
            return self._action(ActionKind.WITCH_PASS)

        if role == RoleId.HUNTER:
            others = self._others(state)
            if self.player_id not in night.hunter_locks and others:
                return self._action(ActionKind.HUNTER_LOCK, target=self._rng.choice(others))
            return self._action(ActionKind.HUNTER_CONFIRM)

        if not get_role(role).has_night_action:
            return self._action(ActionKind.NIGHT_DONE)
        return None

    # ------------------------------------------------------------------
    # Day
    # ------------------------------------------------------------------

    def _discuss(self, state: MatchState) -> Optional[dict[str, Any]]:
        if self.player_id in state.day.discuss_ready:
            return None
        others = self._others(state)
        if (
            state.roles[self.player_id] == RoleId.KNIGHT
            and not state.knight_used
            and others
            and self._rng.random() < 0.2
        ):
            return self._action(ActionKind.KNIGHT_CHALLENGE, target=self._rng.choice(others))
        return self._action(ActionKind.DISCUSS_READY)

    def _vote(self, state: MatchState) -> Optional[dict[str, Any]]:
        day = state.day
        if self.player_id in day.vote_locked:
            return None
        if self.player_id in day.votes:
            return self._action(ActionKind.VOTE_LOCK)
        if self._rng.random() < 0.1:
            return self._action(ActionKind.VOTE_ABSTAIN)
        others = self._others(state)
        target = self._rng.choice(others) if others else ABSTAIN
        return self._action(ActionKind.VOTE_SELECT, target=target)

    def _special(self, state: MatchState) -> Optional[dict[str, Any]]:
        pending = state.special_pending
        if pending is None or pending.actor != self.player_id:
            return None
        others = self._others(state)
        if not others:
            return None
        return self._action(ActionKind.WOLF_LEADER_SHOOT, target=self._rng.choice(others))
