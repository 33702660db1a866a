"""Chronological record of everything that happened in one match."""

from datetime import datetime
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from werewolf_host.events.match_events import MatchEvent, Phase, Winner


class MatchEventLog(BaseModel):
    """Chronological event log for a single match.

    Structure:
    - roles_secret: role dealt to each player
    - events: every applied action and phase transition, in order
    - winner / win_reason: final result
    """

    match_id: str = Field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    roles_secret: dict[str, str] = Field(default_factory=dict)
    events: list[MatchEvent] = Field(default_factory=list)
    winner: Optional[Winner] = None
    win_reason: str = ""

    def add(self, event: MatchEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> list[MatchEvent]:
        """Return all events of one kind."""
        return [e for e in self.events if e.kind == kind]

    def in_phase(self, phase: Phase) -> list[MatchEvent]:
        return [e for e in self.events if e.phase == phase]

    def __str__(self) -> str:
        lines = [f"Match {self.match_id} ({len(self.roles_secret)} players)"]
        for player_id, role in sorted(self.roles_secret.items()):
            lines.append(f"  {player_id}: {role}")
        current_round = None
        for event in self.events:
            if event.round != current_round:
                current_round = event.round
                lines.append(f"Round {current_round}")
            lines.append(f"    {event}")
        if self.winner is not None:
            lines.append(f"  Winner: {self.winner.value} ({self.win_reason})")
        return "\n".join(lines)

    def to_yaml(self, include_roles: bool = False) -> str:
        """Serialize the log to a YAML string."""
        data = self.model_dump(mode="json")
        if not include_roles:
            data["roles_secret"] = {}
        return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def save_to_file(self, filepath: str, include_roles: bool = False) -> None:
        """Write the log to a YAML file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.to_yaml(include_roles=include_roles))

    @classmethod
    def load_from_file(cls, filepath: str) -> "MatchEventLog":
        """Load a log previously written by save_to_file."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)
