"""Events package."""

from werewolf_host.events.match_events import (
    # Enums
    Phase,
    DeathCause,
    SeerResult,
    Winner,
    SpecialKind,
    NoEliminationReason,
    # Records
    MatchEvent,
)
from werewolf_host.events.match_log import MatchEventLog
from werewolf_host.events.actions import (
    ABSTAIN,
    ActionKind,
    HOST_ONLY_KINDS,
    Action,
    BaseAction,
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
    parse_action,
)

__all__ = [
    # Enums
    "Phase",
    "DeathCause",
    "SeerResult",
    "Winner",
    "SpecialKind",
    "NoEliminationReason",
    # Records
    "MatchEvent",
    "MatchEventLog",
    # Actions
    "ABSTAIN",
    "ActionKind",
    "HOST_ONLY_KINDS",
    "Action",
    "BaseAction",
    "WolfVote",
    "WolfConfirm",
    "SeerCheck",
    "WitchSave",
    "WitchPoison",
    "WitchPass",
    "HunterLock",
    "HunterConfirm",
    "NightDone",
    "WolfLeaderShoot",
    "KnightChallenge",
    "VoteSelect",
    "VoteAbstain",
    "VoteLock",
    "VoteUnlock",
    "DiscussReady",
    "HostForceVote",
    "StartNight",
    "StartDiscuss",
    "ReturnToLobby",
    "parse_action",
]
