"""User operations: listing, lookup by ID, and profiles."""

from __future__ import annotations

from typing import Optional

from clack.api.context import ClientContext
from clack.api.pagination import paginate
from clack.cache.freshness import EntityKind
from clack.models import (
    User,
    UserInfoResponse,
    UserProfile,
    UserProfileResponse,
    UsersListResponse,
)


def list_users(
    ctx: ClientContext,
    include_deleted: bool = False,
    page_size: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[User]:
    """Fetch workspace members from the API, caching every page.

    The listing always goes to the API. Deactivated users are cached like
    everyone else and only filtered out of the returned list.

    Args:
        ctx: The access context.
        include_deleted: Keep deactivated accounts in the result.
        page_size: Users requested per page (``ctx.page_size`` when omitted).
        limit: Stop requesting pages once this many users have been seen.
    """
    users: list[User] = []
    for page in paginate(
        ctx, "users.list", None, UsersListResponse, "members",
        kind=EntityKind.USERS, page_size=page_size,
    ):
        users.extend(page)
        if limit is not None and len(users) >= limit:
            users = users[:limit]
            break

    if not include_deleted:
        users = [user for user in users if not user.deleted]
    return users


def get_user(ctx: ClientContext, user_id: str) -> User:
    """Return one user, from the cache when fresh, else via ``users.info``."""
    cached = ctx.read(EntityKind.USERS, user_id)
    if cached is not None:
        assert isinstance(cached, User)
        return cached

    user = ctx.dispatcher.call("users.info", {"user": user_id}, UserInfoResponse).user
    ctx.write(EntityKind.USERS, [user])
    return user


def get_profile(ctx: ClientContext, user_id: Optional[str] = None) -> UserProfile:
    """Return a user's profile, or the token owner's when *user_id* is omitted.

    Profiles are not cached.
    """
    params = {"user": user_id} if user_id else None
    return ctx.dispatcher.call("users.profile.get", params, UserProfileResponse).profile
