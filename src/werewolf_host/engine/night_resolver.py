"""Night actions and night resolution.

All night-active players act at the same time. Each handler validates its
preconditions and returns True only when it changed the state; anything else
is discarded without touching the state.

Resolution order (applied once per night):
1. Wolf kill (unless the witch committed the antidote)
2. Witch poison (if the target is still alive)
3. Hunter carry-along for a hunter who died in steps 1-2
"""

import logging
import random
from collections import Counter
from typing import Optional

from werewolf_host.engine.match_state import MatchState
from werewolf_host.events.match_events import DeathCause, SeerResult
from werewolf_host.models.role import RoleId, get_role

logger = logging.getLogger(__name__)


class NightResolver:
    """Collects simultaneous night actions and computes end-of-night deaths."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Wolves
    # ------------------------------------------------------------------

    def wolf_vote(self, state: MatchState, voter: str, target: str) -> bool:
        """Record or change a wolf's vote; unanimity finalizes the kill."""
        night = state.night
        if night.wolf_confirmed or not self._is_alive_wolf(state, voter):
            return False
        if not state.is_alive(target) or state.is_wolf(target):
            return False

        night.wolf_votes[voter] = target

        wolves = state.alive_wolves()
        if all(night.wolf_votes.get(w) == target for w in wolves):
            self._finalize_wolf_kill(state, target)
        return True

    def wolf_confirm(self, state: MatchState, wolf: str) -> bool:
        """Force the pack's decision: plurality target, random tie-break."""
        night = state.night
        if night.wolf_confirmed or not self._is_alive_wolf(state, wolf):
            return False

        tally = Counter(
            target for voter, target in night.wolf_votes.items()
            if state.is_alive(voter) and state.is_alive(target)
        )
        if not tally:
            return False

        top_count = max(tally.values())
        tied = sorted(t for t, count in tally.items() if count == top_count)
        target = self._rng.choice(tied)
        self._finalize_wolf_kill(state, target)
        return True

    def _finalize_wolf_kill(self, state: MatchState, target: str) -> None:
        state.night.wolf_target = target
        state.night.wolf_confirmed = True
        state.night.confirmed.update(state.alive_wolves())
        logger.debug("Wolves finalized target %s", target)

    def _is_alive_wolf(self, state: MatchState, player_id: str) -> bool:
        return state.is_alive(player_id) and state.is_wolf(player_id)

    # ------------------------------------------------------------------
    # Seer
    # ------------------------------------------------------------------

    def seer_check(self, state: MatchState, seer: str, target: str) -> bool:
        """Check one living player per night; the result is kept for the match."""
        if not state.has_role(seer, RoleId.SEER):
            return False
        if seer in state.night.seer_checked:
            return False
        if target == seer or not state.is_alive(target):
            return False

        result = SeerResult.BAD if state.is_wolf(target) else SeerResult.GOOD
        state.seer_results.setdefault(seer, {})[target] = result
        state.night.seer_checked[seer] = target
        state.night.confirmed.add(seer)
        return True

    # ------------------------------------------------------------------
    # Witch
    # ------------------------------------------------------------------

    def witch_save(self, state: MatchState, witch: str) -> bool:
        """Toggle the antidote on the wolves' finalized target."""
        night = state.night
        if not self._witch_can_act(state, witch):
            return False
        if state.witch_antidote_used or night.wolf_target is None:
            return False
        night.witch_save = not night.witch_save
        return True

    def witch_poison(self, state: MatchState, witch: str, target: Optional[str]) -> bool:
        """Select, reselect or clear the poison target.

        Selecting the currently selected target clears it.
        """
        night = state.night
        if not self._witch_can_act(state, witch) or state.witch_poison_used:
            return False
        if target is None or target == night.witch_poison:
            if night.witch_poison is None:
                return False
            night.witch_poison = None
            return True
        if not state.is_alive(target):
            return False
        night.witch_poison = target
        return True

    def witch_pass(self, state: MatchState, witch: str) -> bool:
        """Commit the current choices and consume the potions used."""
        night = state.night
        if not self._witch_can_act(state, witch):
            return False
        night.witch_done = True
        if night.witch_save:
            state.witch_antidote_used = True
        if night.witch_poison is not None:
            state.witch_poison_used = True
        night.confirmed.add(witch)
        return True

    def _witch_can_act(self, state: MatchState, witch: str) -> bool:
        return state.has_role(witch, RoleId.WITCH) and not state.night.witch_done

    # ------------------------------------------------------------------
    # Hunter
    # ------------------------------------------------------------------

    def hunter_lock(self, state: MatchState, hunter: str, target: Optional[str]) -> bool:
        """Set, change or clear (target=None) the hunter's standing lock."""
        night = state.night
        if not state.has_role(hunter, RoleId.HUNTER) or hunter in night.hunter_confirmed:
            return False
        if target is None:
            if hunter not in night.hunter_locks:
                return False
            del night.hunter_locks[hunter]
            return True
        if target == hunter or not state.is_alive(target):
            return False
        if night.hunter_locks.get(hunter) == target:
            return False
        night.hunter_locks[hunter] = target
        return True

    def hunter_confirm(self, state: MatchState, hunter: str) -> bool:
        night = state.night
        if not state.has_role(hunter, RoleId.HUNTER) or hunter in night.hunter_confirmed:
            return False
        night.hunter_confirmed.add(hunter)
        night.confirmed.add(hunter)
        return True

    # ------------------------------------------------------------------
    # Passive roles
    # ------------------------------------------------------------------

    def night_done(self, state: MatchState, player_id: str) -> bool:
        """A living player without a night action acknowledges the night."""
        if not state.is_alive(player_id):
            return False
        if get_role(state.roles[player_id]).has_night_action:
            return False
        if player_id in state.night.confirmed:
            return False
        state.night.confirmed.add(player_id)
        return True

    # ------------------------------------------------------------------
    # Completion and resolution
    # ------------------------------------------------------------------

    def is_complete(self, state: MatchState) -> bool:
        """Every living night-active player has confirmed."""
        return set(state.night_actors()) <= state.night.confirmed

    def resolve(self, state: MatchState) -> list[str]:
        """Apply the night's outcome to the state.

        Args:
            state: Match state in the NIGHT phase.

        Returns:
            Players who died tonight, in order of death.
        """
        night = state.night
        died: list[str] = []

        # Unconfirmed witch choices never take effect
        saved = night.witch_done and night.witch_save
        poison_target = night.witch_poison if night.witch_done else None

        if night.wolf_target is not None and not saved:
            if state.kill(night.wolf_target, DeathCause.WOLF_KILL):
                died.append(night.wolf_target)

        if poison_target is not None:
            if state.kill(poison_target, DeathCause.POISON):
                died.append(poison_target)

        for hunter in [p for p in died if state.roles[p] == RoleId.HUNTER]:
            locked = night.hunter_locks.get(hunter)
            if locked is not None and state.kill(locked, DeathCause.HUNTER_CARRY):
                died.append(locked)

        logger.info("Night %d resolved, died: %s", state.round, died or "none")
        return died
