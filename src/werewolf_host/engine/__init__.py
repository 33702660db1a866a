"""Engine package - match state, resolution components and orchestration."""

from .match_state import (
    MatchState,
    NightState,
    DayState,
    Announcement,
    VoteOutcome,
    SpecialPending,
)
from .base import PlayerRoster, BroadcastSink, StaticRoster, RecordingSink
from .scheduling import Scheduler, TimerHandle, AsyncioScheduler, VirtualScheduler
from .night_resolver import NightResolver
from .day_controller import DayController, DuelOutcome
from .win_evaluator import WinEvaluator, WinResult
from .werewolf_engine import WerewolfEngine, ACTION_PHASES
from .validator import (
    MatchValidator,
    NoOpValidator,
    CollectingValidator,
    StrictValidator,
    create_validator,
)

__all__ = [
    "MatchState",
    "NightState",
    "DayState",
    "Announcement",
    "VoteOutcome",
    "SpecialPending",
    "PlayerRoster",
    "BroadcastSink",
    "StaticRoster",
    "RecordingSink",
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "VirtualScheduler",
    "NightResolver",
    "DayController",
    "DuelOutcome",
    "WinEvaluator",
    "WinResult",
    "WerewolfEngine",
    "ACTION_PHASES",
    "MatchValidator",
    "NoOpValidator",
    "CollectingValidator",
    "StrictValidator",
    "create_validator",
]
