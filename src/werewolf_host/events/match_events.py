"""Enums and event records shared by the engine and its clients."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Phase(str, Enum):
    """Phases of a werewolf match."""

    ROLE_REVEAL = "role_reveal"
    NIGHT = "night"
    DAY_ANNOUNCE = "day_announce"
    DAY_DISCUSS = "day_discuss"
    VOTE = "vote"
    VOTE_RESULT = "vote_result"
    SPECIAL = "special"
    END = "end"


class DeathCause(str, Enum):
    """Human-readable cause of death recorded in the death log."""

    WOLF_KILL = "killed by wolves"
    POISON = "poisoned by witch"
    HUNTER_CARRY = "taken down with the hunter"
    VOTED_OUT = "voted out"
    BOMBER_VOTED_OUT = "voted out and detonated"
    BOMBER_SOLO_WIN = "voted out by everyone"
    BLAST = "caught in the blast"
    DUELED = "dueled"
    LOST_DUEL = "lost the duel"
    WOLF_LEADER_SHOT = "taken by the wolf-leader"


class SeerResult(str, Enum):
    """Result of a seer check."""

    GOOD = "good"
    BAD = "bad"


class Winner(str, Enum):
    """Who won the match."""

    VILLAGE = "village"
    WOLVES = "wolves"
    BOMBER = "bomber"


class SpecialKind(str, Enum):
    """Posthumous abilities."""

    WOLF_LEADER_SHOT = "wolf_leader_shot"


class NoEliminationReason(str, Enum):
    """Why a vote produced no elimination."""

    ALL_ABSTAINED = "all_abstained"
    TIE = "tie"


class MatchEvent(BaseModel):
    """One entry in the match history."""

    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    round: int = 0
    phase: Phase
    kind: str
    actor: Optional[str] = None
    target: Optional[str] = None
    detail: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"round={self.round}", f"phase={self.phase.value}"]
        if self.actor is not None:
            parts.append(f"actor={self.actor}")
        if self.target is not None:
            parts.append(f"target={self.target}")
        if self.detail:
            parts.append(self.detail)
        return f"{self.kind}({', '.join(parts)})"
