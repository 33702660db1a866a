"""Inbound player actions.

Every action relayed by the transport layer is one member of the closed
``Action`` union, discriminated by ``kind`` and always carrying the acting
player's id. ``parse_action`` turns a raw transport payload into a typed
action.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


# Vote target meaning "no one"
ABSTAIN = "__abstain__"


class ActionKind(str, Enum):
    """All inbound action kinds."""

    WOLF_VOTE = "wolf_vote"
    WOLF_CONFIRM = "wolf_confirm"
    SEER_CHECK = "seer_check"
    WITCH_SAVE = "witch_save"
    WITCH_POISON = "witch_poison"
    WITCH_PASS = "witch_pass"
    HUNTER_LOCK = "hunter_lock"
    HUNTER_CONFIRM = "hunter_confirm"
    WOLF_LEADER_SHOOT = "wolf_leader_shoot"
    KNIGHT_CHALLENGE = "knight_challenge"
    NIGHT_DONE = "night_done"
    VOTE_SELECT = "vote_select"
    VOTE_ABSTAIN = "vote_abstain"
    VOTE_LOCK = "vote_lock"
    VOTE_UNLOCK = "vote_unlock"
    DISCUSS_READY = "discuss_ready"
    HOST_FORCE_VOTE = "host_force_vote"
    START_NIGHT = "start_night"
    START_DISCUSS = "start_discuss"
    RETURN_TO_LOBBY = "return_to_lobby"


HOST_ONLY_KINDS = frozenset({
    ActionKind.HOST_FORCE_VOTE,
    ActionKind.START_NIGHT,
    ActionKind.START_DISCUSS,
    ActionKind.RETURN_TO_LOBBY,
})


class BaseAction(BaseModel):
    """Base class for all actions."""

    player_id: str

    @property
    def action_kind(self) -> ActionKind:
        return ActionKind(self.kind)  # type: ignore[attr-defined]

    def __str__(self) -> str:
        target = getattr(self, "target", None)
        target_str = f", target={target}" if target is not None else ""
        return f"{self.__class__.__name__}(player={self.player_id}{target_str})"


# ============================================================================
# Night actions
# ============================================================================


class WolfVote(BaseAction):
    kind: Literal["wolf_vote"] = "wolf_vote"
    target: str


class WolfConfirm(BaseAction):
    kind: Literal["wolf_confirm"] = "wolf_confirm"


class SeerCheck(BaseAction):
    kind: Literal["seer_check"] = "seer_check"
    target: str


class WitchSave(BaseAction):
    """Toggle the antidote on the wolves' target."""

    kind: Literal["witch_save"] = "witch_save"


class WitchPoison(BaseAction):
    """Select, reselect or clear (target=None) the poison target."""

    kind: Literal["witch_poison"] = "witch_poison"
    target: Optional[str] = None


class WitchPass(BaseAction):
    """Commit the current antidote/poison choices and finish the night."""

    kind: Literal["witch_pass"] = "witch_pass"


class HunterLock(BaseAction):
    kind: Literal["hunter_lock"] = "hunter_lock"
    target: Optional[str] = None


class HunterConfirm(BaseAction):
    kind: Literal["hunter_confirm"] = "hunter_confirm"


class NightDone(BaseAction):
    """A player without a night action acknowledges the night."""

    kind: Literal["night_done"] = "night_done"


# ============================================================================
# Day actions
# ============================================================================


class WolfLeaderShoot(BaseAction):
    kind: Literal["wolf_leader_shoot"] = "wolf_leader_shoot"
    target: str


class KnightChallenge(BaseAction):
    kind: Literal["knight_challenge"] = "knight_challenge"
    target: str


class VoteSelect(BaseAction):
    """Select a vote target; ABSTAIN selects (and locks) an abstention."""

    kind: Literal["vote_select"] = "vote_select"
    target: str


class VoteAbstain(BaseAction):
    kind: Literal["vote_abstain"] = "vote_abstain"


class VoteLock(BaseAction):
    kind: Literal["vote_lock"] = "vote_lock"


class VoteUnlock(BaseAction):
    kind: Literal["vote_unlock"] = "vote_unlock"


class DiscussReady(BaseAction):
    kind: Literal["discuss_ready"] = "discuss_ready"


# ============================================================================
# Host actions
# ============================================================================


class HostForceVote(BaseAction):
    kind: Literal["host_force_vote"] = "host_force_vote"


class StartNight(BaseAction):
    kind: Literal["start_night"] = "start_night"


class StartDiscuss(BaseAction):
    kind: Literal["start_discuss"] = "start_discuss"


class ReturnToLobby(BaseAction):
    kind: Literal["return_to_lobby"] = "return_to_lobby"


Action = Annotated[
    Union[
        WolfVote,
        WolfConfirm,
        SeerCheck,
        WitchSave,
        WitchPoison,
        WitchPass,
        HunterLock,
        HunterConfirm,
        NightDone,
        WolfLeaderShoot,
        KnightChallenge,
        VoteSelect,
        VoteAbstain,
        VoteLock,
        VoteUnlock,
        DiscussReady,
        HostForceVote,
        StartNight,
        StartDiscuss,
        ReturnToLobby,
    ],
    Field(discriminator="kind"),
]

_ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


def parse_action(payload: dict) -> BaseAction:
    """Validate a raw transport payload into a typed action.

    Raises:
        pydantic.ValidationError: if the payload is not a known action.
    """
    return _ACTION_ADAPTER.validate_python(payload)
