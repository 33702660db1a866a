"""Day cycle: discussion readiness, knight duel, lock-based voting and elimination.

Voting rules:
- Each living player selects any other living player or abstains
- A selection can change until the player locks it; abstaining auto-locks
- Only non-abstain votes are tallied; no votes or a tied top = no elimination
- A voted-out hunter takes their locked target along
- A voted-out bomber wins alone if every other living player voted for them,
  otherwise everyone who voted for the bomber dies in the blast
"""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel

from werewolf_host.engine.match_state import MatchState, VoteOutcome
from werewolf_host.events.actions import ABSTAIN
from werewolf_host.events.match_events import DeathCause, NoEliminationReason
from werewolf_host.models.role import RoleId

logger = logging.getLogger(__name__)


class DuelOutcome(BaseModel):
    """Result of a knight's challenge."""

    knight: str
    target: str
    victim: str
    triggers_special: bool = False


class DayController:
    """Runs discussion, voting and elimination for one day."""

    # ------------------------------------------------------------------
    # Discussion
    # ------------------------------------------------------------------

    def discuss_ready(self, state: MatchState, player_id: str) -> bool:
        if not state.is_alive(player_id) or player_id in state.day.discuss_ready:
            return False
        state.day.discuss_ready.add(player_id)
        return True

    def everyone_ready(self, state: MatchState) -> bool:
        return set(state.alive_players()) <= state.day.discuss_ready

    def knight_challenge(
        self,
        state: MatchState,
        knight: str,
        target: str,
    ) -> Optional[DuelOutcome]:
        """Resolve a one-shot duel.

        A wolf target dies; otherwise the knight dies. A dueled wolf-leader
        gets a posthumous shot.

        Returns:
            DuelOutcome, or None if the challenge was not allowed.
        """
        if not state.has_role(knight, RoleId.KNIGHT) or state.knight_used:
            return None
        if target == knight or not state.is_alive(target):
            return None

        state.knight_used = True
        if state.is_wolf(target):
            state.kill(target, DeathCause.DUELED)
            outcome = DuelOutcome(
                knight=knight,
                target=target,
                victim=target,
                triggers_special=state.roles[target] == RoleId.WOLF_LEADER,
            )
        else:
            state.kill(knight, DeathCause.LOST_DUEL)
            outcome = DuelOutcome(knight=knight, target=target, victim=knight)

        logger.info("Knight %s dueled %s, %s died", knight, target, outcome.victim)
        return outcome

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    def vote_select(self, state: MatchState, voter: str, target: str) -> bool:
        """Select or change a vote target (ABSTAIN allowed) while unlocked."""
        day = state.day
        if not state.is_alive(voter) or voter in day.vote_locked:
            return False
        if target != ABSTAIN and (target == voter or not state.is_alive(target)):
            return False
        if day.votes.get(voter) == target:
            return False
        day.votes[voter] = target
        return True

    def vote_abstain(self, state: MatchState, voter: str) -> bool:
        """Abstain and lock in one step."""
        day = state.day
        if not state.is_alive(voter) or voter in day.vote_locked:
            return False
        day.votes[voter] = ABSTAIN
        day.vote_locked.add(voter)
        return True

    def vote_lock(self, state: MatchState, voter: str) -> bool:
        day = state.day
        if not state.is_alive(voter) or voter in day.vote_locked:
            return False
        if voter not in day.votes:
            return False
        day.vote_locked.add(voter)
        return True

    def vote_unlock(self, state: MatchState, voter: str) -> bool:
        day = state.day
        if not state.is_alive(voter) or voter not in day.vote_locked:
            return False
        day.vote_locked.discard(voter)
        return True

    def everyone_locked(self, state: MatchState) -> bool:
        return set(state.alive_players()) <= state.day.vote_locked

    def auto_abstain(self, state: MatchState) -> list[str]:
        """Convert every unlocked living player into a locked abstention."""
        day = state.day
        converted = []
        for player_id in state.alive_players():
            if player_id not in day.vote_locked:
                day.votes[player_id] = ABSTAIN
                day.vote_locked.add(player_id)
                converted.append(player_id)
        return converted

    def tally(self, state: MatchState) -> Counter:
        """Count non-abstain votes cast by living players for living targets."""
        return Counter(
            target for voter, target in state.day.votes.items()
            if target != ABSTAIN and state.is_alive(voter) and state.is_alive(target)
        )

    def resolve_vote(self, state: MatchState) -> VoteOutcome:
        """Tally the votes and apply the elimination.

        Returns:
            VoteOutcome describing who died and why (also stored on the day).
        """
        votes = state.day.votes
        abstain_count = sum(1 for target in votes.values() if target == ABSTAIN)
        tally = self.tally(state)

        if not tally:
            outcome = VoteOutcome(
                abstain_count=abstain_count,
                reason=NoEliminationReason.ALL_ABSTAINED,
            )
            state.day.result = outcome
            logger.info("Vote round %d: no elimination (all abstained)", state.round)
            return outcome

        top_count = max(tally.values())
        top = [target for target, count in tally.items() if count == top_count]
        if len(top) > 1:
            outcome = VoteOutcome(
                abstain_count=abstain_count,
                reason=NoEliminationReason.TIE,
                tied=sorted(top),
            )
            state.day.result = outcome
            logger.info("Vote round %d: no elimination (tie %s)", state.round, outcome.tied)
            return outcome

        eliminated = top[0]
        voters = [voter for voter, target in votes.items() if target == eliminated]
        outcome = VoteOutcome(
            eliminated=eliminated,
            voters=voters,
            abstain_count=abstain_count,
        )

        role = state.roles[eliminated]
        if role == RoleId.BOMBER:
            self._resolve_bomber(state, eliminated, voters, outcome)
        else:
            state.kill(eliminated, DeathCause.VOTED_OUT)
            if role == RoleId.HUNTER:
                locked = state.night.hunter_locks.get(eliminated)
                if locked is not None and state.kill(locked, DeathCause.HUNTER_CARRY):
                    outcome.hunter_carried = locked

        state.day.result = outcome
        logger.info("Vote round %d: %s voted out by %s", state.round, eliminated, voters)
        return outcome

    def _resolve_bomber(
        self,
        state: MatchState,
        bomber: str,
        voters: list[str],
        outcome: VoteOutcome,
    ) -> None:
        # The bomber cannot vote for themselves, so only the others count
        eligible = {p for p in state.alive_players() if p != bomber}
        if eligible <= set(voters):
            state.kill(bomber, DeathCause.BOMBER_SOLO_WIN)
            outcome.bomber_win = True
            return

        state.kill(bomber, DeathCause.BOMBER_VOTED_OUT)
        for voter in voters:
            if state.kill(voter, DeathCause.BLAST):
                outcome.blast_victims.append(voter)
