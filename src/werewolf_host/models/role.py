"""Role catalog and role dealing."""

import random
from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict


class RoleId(str, Enum):
    """Playable roles."""

    WOLF = "wolf"
    WOLF_LEADER = "wolf_leader"
    VILLAGER = "villager"
    SEER = "seer"
    WITCH = "witch"
    HUNTER = "hunter"
    KNIGHT = "knight"
    BOMBER = "bomber"


class Faction(str, Enum):
    """Factions for win evaluation."""

    WOLF = "wolf"
    VILLAGE = "village"
    INDEPENDENT = "independent"


class Role(BaseModel):
    """Immutable role record."""

    id: RoleId
    faction: Faction
    has_night_action: bool
    description: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_wolf(self) -> bool:
        return self.faction == Faction.WOLF


ROLE_CATALOG: dict[RoleId, Role] = {
    RoleId.WOLF: Role(
        id=RoleId.WOLF,
        faction=Faction.WOLF,
        has_night_action=True,
        description="Choose a victim together with the pack each night",
    ),
    RoleId.WOLF_LEADER: Role(
        id=RoleId.WOLF_LEADER,
        faction=Faction.WOLF,
        has_night_action=True,
        description="Wolf who takes one player along when voted out or dueled",
    ),
    RoleId.VILLAGER: Role(
        id=RoleId.VILLAGER,
        faction=Faction.VILLAGE,
        has_night_action=False,
        description="Find and vote out every wolf",
    ),
    RoleId.SEER: Role(
        id=RoleId.SEER,
        faction=Faction.VILLAGE,
        has_night_action=True,
        description="Check one player's faction each night",
    ),
    RoleId.WITCH: Role(
        id=RoleId.WITCH,
        faction=Faction.VILLAGE,
        has_night_action=True,
        description="One antidote and one poison per match",
    ),
    RoleId.HUNTER: Role(
        id=RoleId.HUNTER,
        faction=Faction.VILLAGE,
        has_night_action=True,
        description="Locks a target each night; the target dies with the hunter",
    ),
    RoleId.KNIGHT: Role(
        id=RoleId.KNIGHT,
        faction=Faction.VILLAGE,
        has_night_action=False,
        description="May duel one player during the day, once per match",
    ),
    RoleId.BOMBER: Role(
        id=RoleId.BOMBER,
        faction=Faction.INDEPENDENT,
        has_night_action=False,
        description="Wins alone if everyone votes them out; otherwise takes the voters along",
    ),
}

WOLF_ROLES = frozenset(
    role_id for role_id, role in ROLE_CATALOG.items() if role.faction == Faction.WOLF
)

# Roles whose match state is tracked as a single value
SINGLETON_ROLES = frozenset({RoleId.WITCH, RoleId.KNIGHT})


def get_role(role_id: RoleId) -> Role:
    """Look up a role in the catalog."""
    return ROLE_CATALOG[RoleId(role_id)]


def is_wolf(role_id: Optional[RoleId]) -> bool:
    """Check whether a role belongs to the wolf faction."""
    return role_id is not None and RoleId(role_id) in WOLF_ROLES


def build_deck(counts: dict[RoleId, int], player_count: int) -> list[RoleId]:
    """Expand a headcount configuration into a deck of exactly player_count roles.

    Missing seats are padded with villagers. The caller is expected to have
    validated that the configured total does not exceed player_count.
    """
    deck: list[RoleId] = []
    for role_id in RoleId:
        deck.extend([role_id] * counts.get(role_id, 0))
    if len(deck) > player_count:
        raise ValueError(
            f"Configured {len(deck)} roles for only {player_count} players"
        )
    deck.extend([RoleId.VILLAGER] * (player_count - len(deck)))
    return deck


def deal_roles(
    counts: dict[RoleId, int],
    player_ids: Sequence[str],
    rng: Optional[random.Random] = None,
) -> dict[str, RoleId]:
    """Deal roles to players uniformly at random.

    Args:
        counts: Requested headcount per role.
        player_ids: Eligible (non-spectator) player ids.
        rng: random.Random instance for reproducible dealing.

    Returns:
        Mapping player id -> role id covering every player exactly once.
    """
    rng = rng or random.Random()
    deck = build_deck(counts, len(player_ids))

    # Fisher-Yates via random.shuffle
    rng.shuffle(deck)

    return {player_id: deck[i] for i, player_id in enumerate(player_ids)}
