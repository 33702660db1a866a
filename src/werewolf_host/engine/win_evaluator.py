"""Win evaluation - pure predicate over MatchState."""

from typing import Optional

from pydantic import BaseModel

from werewolf_host.engine.match_state import MatchState
from werewolf_host.events.match_events import Winner


VILLAGE_WIN_REASON = "All wolves have been eliminated."
WOLF_WIN_REASON = "Wolves are no fewer than the other living players."
BOMBER_WIN_REASON = "Everyone voted out the bomber, who wins alone."


class WinResult(BaseModel):
    winner: Winner
    reason: str


class WinEvaluator:
    """Decides whether a match has ended.

    Victory conditions:
    - Village wins when no wolf is alive
    - Wolves win when living wolves >= all other living players
      (villagers and independents alike; a tie counts for the wolves)

    The bomber's solo win is decided by the vote resolution, not here.
    """

    def evaluate(self, state: MatchState) -> Optional[WinResult]:
        """Return the winner, or None while the match continues."""
        wolves = state.alive_wolves()
        others = state.alive_non_wolves()

        if not wolves:
            return WinResult(winner=Winner.VILLAGE, reason=VILLAGE_WIN_REASON)

        if len(wolves) >= len(others):
            return WinResult(winner=Winner.WOLVES, reason=WOLF_WIN_REASON)

        return None
