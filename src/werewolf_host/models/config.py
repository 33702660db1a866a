"""Match configuration: role headcounts, countdowns and display delays."""

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from werewolf_host.models.role import RoleId, SINGLETON_ROLES, WOLF_ROLES


class MatchConfigError(ValueError):
    """Raised when a match cannot start with the requested configuration."""


def _default_roles() -> dict[RoleId, int]:
    return {
        RoleId.WOLF: 2,
        RoleId.WOLF_LEADER: 0,
        RoleId.SEER: 1,
        RoleId.WITCH: 1,
        RoleId.HUNTER: 1,
        RoleId.KNIGHT: 0,
        RoleId.BOMBER: 0,
    }


class PhaseDelays(BaseModel):
    """Fixed delays (seconds) that let clients render a result before moving on."""

    announce_win_check: float = Field(default=4.0, ge=0)
    vote_result: float = Field(default=3.5, ge=0)
    blast_extra: float = Field(default=2.0, ge=0)
    special_return: float = Field(default=2.5, ge=0)
    tick: float = Field(default=1.0, gt=0)


class MatchConfig(BaseModel):
    """Host-chosen settings for one werewolf match."""

    roles: dict[RoleId, int] = Field(default_factory=_default_roles)
    night_time: int = Field(default=30, ge=1)
    vote_time: int = Field(default=60, ge=1)
    special_time: int = Field(default=30, ge=1)
    timing: PhaseDelays = Field(default_factory=PhaseDelays)

    @field_validator("roles")
    @classmethod
    def _counts_not_negative(cls, roles: dict[RoleId, int]) -> dict[RoleId, int]:
        for role_id, count in roles.items():
            if count < 0:
                raise ValueError(f"Negative headcount for {role_id.value}: {count}")
        return roles

    @property
    def total_roles(self) -> int:
        return sum(self.roles.values())

    @property
    def wolf_count(self) -> int:
        return sum(self.roles.get(role_id, 0) for role_id in WOLF_ROLES)

    def check(self, player_count: int) -> None:
        """Reject configurations that cannot be dealt to player_count players.

        Raises:
            MatchConfigError: if the match must not leave the lobby.
        """
        if self.wolf_count == 0:
            raise MatchConfigError("At least one wolf is required")
        if self.total_roles > player_count:
            raise MatchConfigError(
                f"{self.total_roles} roles configured but only {player_count} players"
            )
        for role_id in SINGLETON_ROLES:
            if self.roles.get(role_id, 0) > 1:
                raise MatchConfigError(f"At most one {role_id.value} is supported")

    @classmethod
    def from_dict(cls, data: dict) -> "MatchConfig":
        """Build a config from plain data, converting validation failures."""
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise MatchConfigError(str(e)) from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "MatchConfig":
        """Load a config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)
