"""Freshness policy: when is a cached row still good enough to serve?

A row is fresh while its age is strictly below the TTL for its kind.
Name resolution passes :data:`INFINITE_TTL` so that any cached row, however
old, is accepted for mapping a name to an ID.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional

from clack.models import CacheConfig

INFINITE_TTL = math.inf


class EntityKind(str, enum.Enum):
    """The cached entity kinds; values double as table names."""

    USERS = "users"
    CONVERSATIONS = "conversations"
    MESSAGES = "messages"


def is_fresh(age: float, ttl: float) -> bool:
    """Return True when a row of the given *age* is within *ttl* (both in seconds)."""
    return age < ttl


@dataclass(frozen=True)
class FreshnessPolicy:
    """Per-kind TTLs, in seconds."""

    users_ttl: float = 7 * 24 * 3600
    conversations_ttl: float = 7 * 24 * 3600
    messages_ttl: float = 7 * 24 * 3600

    @classmethod
    def from_config(cls, config: CacheConfig) -> FreshnessPolicy:
        return cls(
            users_ttl=config.users_ttl_seconds,
            conversations_ttl=config.conversations_ttl_seconds,
            messages_ttl=config.messages_ttl_seconds,
        )

    def ttl_for(self, kind: EntityKind, override: Optional[float] = None) -> float:
        """Return *override* when given, else the configured TTL for *kind*."""
        if override is not None:
            return override
        if kind is EntityKind.USERS:
            return self.users_ttl
        if kind is EntityKind.CONVERSATIONS:
            return self.conversations_ttl
        return self.messages_ttl
