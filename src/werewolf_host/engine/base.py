"""Collaborator interfaces consumed by the engine.

The engine does not own transport or room management. It is handed:
- a PlayerRoster, used once at match start to find who gets a role
- a BroadcastSink, which receives a full snapshot after every state change

StaticRoster and RecordingSink are in-memory implementations used by the
simulation CLI and the tests.
"""

from typing import Any, Protocol

from pydantic import BaseModel, Field


class PlayerRoster(Protocol):
    """Room membership as seen by the host."""

    def alive_eligible_players(self) -> list[str]:
        """Connected players, in seating order."""
        ...

    def is_spectator(self, player_id: str) -> bool:
        ...


class BroadcastSink(Protocol):
    """Pushes the authoritative state to every participant."""

    def broadcast_state(self, snapshot: dict[str, Any]) -> None:
        ...


class StaticRoster(BaseModel):
    """Fixed roster of players, some of whom may be spectating."""

    players: list[str]
    spectators: set[str] = Field(default_factory=set)

    def alive_eligible_players(self) -> list[str]:
        return list(self.players)

    def is_spectator(self, player_id: str) -> bool:
        return player_id in self.spectators


class RecordingSink:
    """BroadcastSink that keeps every snapshot it receives."""

    def __init__(self) -> None:
        self.snapshots: list[dict[str, Any]] = []

    def broadcast_state(self, snapshot: dict[str, Any]) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self) -> dict[str, Any]:
        return self.snapshots[-1]

    def __len__(self) -> int:
        return len(self.snapshots)
