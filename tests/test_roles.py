"""Tests for the role catalog and role dealing."""

import random
from collections import Counter

import pytest

from werewolf_host.models import (
    RoleId,
    Faction,
    ROLE_CATALOG,
    WOLF_ROLES,
    get_role,
    is_wolf,
    build_deck,
    deal_roles,
)


def player_ids(count: int) -> list[str]:
    return [f"p{i}" for i in range(1, count + 1)]


class TestRoleCatalog:
    """Tests for the fixed role catalog."""

    def test_every_role_in_catalog(self):
        assert set(ROLE_CATALOG) == set(RoleId)

    @pytest.mark.parametrize("role_id,faction,night", [
        (RoleId.WOLF, Faction.WOLF, True),
        (RoleId.WOLF_LEADER, Faction.WOLF, True),
        (RoleId.VILLAGER, Faction.VILLAGE, False),
        (RoleId.SEER, Faction.VILLAGE, True),
        (RoleId.WITCH, Faction.VILLAGE, True),
        (RoleId.HUNTER, Faction.VILLAGE, True),
        (RoleId.KNIGHT, Faction.VILLAGE, False),
        (RoleId.BOMBER, Faction.INDEPENDENT, False),
    ])
    def test_faction_and_night_action(self, role_id, faction, night):
        role = get_role(role_id)
        assert role.faction == faction
        assert role.has_night_action is night

    def test_roles_are_immutable(self):
        role = get_role(RoleId.SEER)
        with pytest.raises(Exception):
            role.has_night_action = False

    def test_wolf_roles(self):
        assert WOLF_ROLES == {RoleId.WOLF, RoleId.WOLF_LEADER}
        assert is_wolf(RoleId.WOLF_LEADER)
        assert not is_wolf(RoleId.BOMBER)
        assert not is_wolf(None)


class TestBuildDeck:
    """Tests for expanding headcounts into a deck."""

    def test_pads_with_villagers(self):
        deck = build_deck({RoleId.WOLF: 2, RoleId.SEER: 1}, 6)
        assert Counter(deck) == {RoleId.WOLF: 2, RoleId.SEER: 1, RoleId.VILLAGER: 3}

    def test_explicit_villagers_are_kept(self):
        deck = build_deck({RoleId.WOLF: 1, RoleId.VILLAGER: 2}, 4)
        assert Counter(deck) == {RoleId.WOLF: 1, RoleId.VILLAGER: 3}

    def test_exact_fit(self):
        deck = build_deck({RoleId.WOLF: 1, RoleId.WITCH: 1}, 2)
        assert len(deck) == 2

    def test_too_many_roles_rejected(self):
        with pytest.raises(ValueError):
            build_deck({RoleId.WOLF: 3, RoleId.SEER: 1}, 3)


class TestDealRoles:
    """Tests for the random player -> role bijection."""

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("counts,n", [
        ({RoleId.WOLF: 2, RoleId.SEER: 1, RoleId.WITCH: 1, RoleId.HUNTER: 1}, 8),
        ({RoleId.WOLF: 1, RoleId.WOLF_LEADER: 1, RoleId.BOMBER: 1, RoleId.KNIGHT: 1}, 4),
        ({RoleId.WOLF: 1}, 5),
    ])
    def test_counts_match_configuration(self, seed, counts, n):
        ids = player_ids(n)
        roles = deal_roles(counts, ids, rng=random.Random(seed))

        assert set(roles) == set(ids)
        dealt = Counter(roles.values())
        for role_id, count in counts.items():
            assert dealt[role_id] == count
        explicit_villagers = counts.get(RoleId.VILLAGER, 0)
        assert dealt[RoleId.VILLAGER] == explicit_villagers + n - sum(counts.values())

    def test_same_seed_same_deal(self):
        ids = player_ids(8)
        counts = {RoleId.WOLF: 2, RoleId.SEER: 1}
        first = deal_roles(counts, ids, rng=random.Random(7))
        second = deal_roles(counts, ids, rng=random.Random(7))
        assert first == second

    def test_every_seat_equally_likely(self):
        """Each seat should receive the single wolf about a quarter of the time."""
        rng = random.Random(123)
        ids = player_ids(4)
        wolves = Counter()
        for _ in range(4000):
            roles = deal_roles({RoleId.WOLF: 1}, ids, rng=rng)
            wolves.update(p for p, r in roles.items() if r == RoleId.WOLF)

        for player_id in ids:
            assert 850 <= wolves[player_id] <= 1150
