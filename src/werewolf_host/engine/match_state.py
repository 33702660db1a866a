"""MatchState - the single authoritative value describing one werewolf match."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from werewolf_host.models.config import MatchConfig
from werewolf_host.models.role import RoleId, get_role, is_wolf
from werewolf_host.events.match_events import (
    DeathCause,
    NoEliminationReason,
    Phase,
    SeerResult,
    SpecialKind,
    Winner,
)


class NightState(BaseModel):
    """Working state of the current night.

    Replaced by a fresh instance every time a night begins. Hunter locks live
    here too: a lock set during night N stands through day N.
    """

    wolf_votes: dict[str, str] = {}  # voter -> target
    wolf_target: Optional[str] = None
    wolf_confirmed: bool = False
    seer_checked: dict[str, str] = {}  # seer -> target checked this night
    witch_save: bool = False
    witch_poison: Optional[str] = None
    witch_done: bool = False
    hunter_locks: dict[str, str] = {}  # hunter -> locked target
    hunter_confirmed: set[str] = set()
    confirmed: set[str] = set()
    time_left: int = 0


class Announcement(BaseModel):
    """Morning announcement of the night's outcome."""

    peaceful: bool = True
    died: list[str] = []


class VoteOutcome(BaseModel):
    """Result of the most recent day vote."""

    eliminated: Optional[str] = None
    voters: list[str] = []
    abstain_count: int = 0
    reason: Optional[NoEliminationReason] = None
    tied: list[str] = []
    hunter_carried: Optional[str] = None
    blast_victims: list[str] = []
    bomber_win: bool = False


class DayState(BaseModel):
    """Working state of the current day."""

    announcement: Announcement = Field(default_factory=Announcement)
    discuss_ready: set[str] = set()
    votes: dict[str, str] = {}  # voter -> target or ABSTAIN
    vote_locked: set[str] = set()
    vote_time_left: int = 0
    result: Optional[VoteOutcome] = None


class SpecialPending(BaseModel):
    """A posthumous ability waiting for its holder."""

    actor: str
    kind: SpecialKind = SpecialKind.WOLF_LEADER_SHOT
    time_left: int = 0


class MatchState(BaseModel):
    """Full mutable state of one werewolf match.

    Owned by the authority (host) and mirrored read-only to everyone else
    through snapshots. Player ids are the transport's stable string ids.
    """

    phase: Phase = Phase.ROLE_REVEAL
    round: int = 0
    config: MatchConfig = Field(default_factory=MatchConfig)
    roles: dict[str, RoleId]
    alive: dict[str, bool]

    night: NightState = Field(default_factory=NightState)
    day: DayState = Field(default_factory=DayState)

    # Persistent across nights
    seer_results: dict[str, dict[str, SeerResult]] = {}  # seer -> target -> result
    witch_antidote_used: bool = False
    witch_poison_used: bool = False
    knight_used: bool = False

    death_log: dict[str, DeathCause] = {}
    winner: Optional[Winner] = None
    win_reason: str = ""
    special_pending: Optional[SpecialPending] = None

    @classmethod
    def new_match(cls, roles: dict[str, RoleId], config: MatchConfig) -> "MatchState":
        """Create the state for a freshly dealt match."""
        return cls(
            config=config,
            roles=dict(roles),
            alive={player_id: True for player_id in roles},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def role_of(self, player_id: str) -> Optional[RoleId]:
        return self.roles.get(player_id)

    def is_alive(self, player_id: Optional[str]) -> bool:
        return player_id is not None and self.alive.get(player_id, False)

    def is_wolf(self, player_id: str) -> bool:
        return is_wolf(self.roles.get(player_id))

    def has_role(self, player_id: str, role_id: RoleId) -> bool:
        """Check that a player is alive and holds the given role."""
        return self.is_alive(player_id) and self.roles.get(player_id) == role_id

    def alive_players(self) -> list[str]:
        """Living players in dealing order."""
        return [player_id for player_id in self.roles if self.alive.get(player_id)]

    def alive_wolves(self) -> list[str]:
        return [p for p in self.alive_players() if self.is_wolf(p)]

    def alive_non_wolves(self) -> list[str]:
        return [p for p in self.alive_players() if not self.is_wolf(p)]

    def night_actors(self) -> list[str]:
        """Living players whose role must act before the night can end."""
        return [
            p for p in self.alive_players()
            if get_role(self.roles[p]).has_night_action
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def kill(self, player_id: str, cause: DeathCause) -> bool:
        """Mark a living player dead and record the cause.

        Returns:
            True if the player died, False if they were already dead.
        """
        if not self.is_alive(player_id):
            return False
        self.alive[player_id] = False
        if player_id not in self.death_log:
            self.death_log[player_id] = cause
        return True

    def begin_night(self) -> None:
        """Advance to a new round and reset night and day working state."""
        self.round += 1
        self.night = NightState(time_left=self.config.night_time)
        self.day = DayState()
        self.special_pending = None

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        """Plain JSON-compatible copy of the state for broadcasting."""
        return self.model_dump(mode="json")

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> "MatchState":
        """Rebuild a state from a broadcast snapshot."""
        return cls.model_validate(snapshot)
