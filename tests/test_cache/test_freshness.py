"""Tests for the freshness policy."""

from __future__ import annotations

import pytest

from clack.cache.freshness import INFINITE_TTL, EntityKind, FreshnessPolicy, is_fresh
from clack.models import CacheConfig


class TestIsFresh:
    @pytest.mark.parametrize(
        ("age", "ttl", "expected"),
        [
            (0, 60, True),
            (59.999, 60, True),
            (60, 60, False),
            (61, 60, False),
            (0, 0, False),
        ],
    )
    def test_fresh_iff_age_below_ttl(self, age: float, ttl: float, expected: bool) -> None:
        assert is_fresh(age, ttl) is expected

    def test_infinite_ttl_accepts_any_realistic_age(self) -> None:
        ten_years = 10 * 365 * 24 * 3600
        assert is_fresh(ten_years, INFINITE_TTL)


class TestFreshnessPolicy:
    def test_defaults_are_seven_days(self) -> None:
        policy = FreshnessPolicy()
        week = 7 * 24 * 3600
        assert policy.ttl_for(EntityKind.USERS) == week
        assert policy.ttl_for(EntityKind.CONVERSATIONS) == week
        assert policy.ttl_for(EntityKind.MESSAGES) == week

    def test_from_config_uses_per_kind_values(self) -> None:
        config = CacheConfig(
            users_ttl_seconds=10, conversations_ttl_seconds=20, messages_ttl_seconds=30
        )
        policy = FreshnessPolicy.from_config(config)
        assert policy.ttl_for(EntityKind.USERS) == 10
        assert policy.ttl_for(EntityKind.CONVERSATIONS) == 20
        assert policy.ttl_for(EntityKind.MESSAGES) == 30

    def test_override_wins(self) -> None:
        policy = FreshnessPolicy(users_ttl=10)
        assert policy.ttl_for(EntityKind.USERS, 99) == 99
        assert policy.ttl_for(EntityKind.USERS, INFINITE_TTL) == INFINITE_TTL
