"""Models package."""

from werewolf_host.models.role import (
    RoleId,
    Faction,
    Role,
    ROLE_CATALOG,
    WOLF_ROLES,
    get_role,
    is_wolf,
    build_deck,
    deal_roles,
)
from werewolf_host.models.config import (
    MatchConfig,
    MatchConfigError,
    PhaseDelays,
)

__all__ = [
    "RoleId",
    "Faction",
    "Role",
    "ROLE_CATALOG",
    "WOLF_ROLES",
    "get_role",
    "is_wolf",
    "build_deck",
    "deal_roles",
    "MatchConfig",
    "MatchConfigError",
    "PhaseDelays",
]
