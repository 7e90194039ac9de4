"""Turn human-friendly identifiers into workspace IDs.

Users type ``#general`` or ``@alex``; the API wants ``C024BE91L`` and
``U024BE7LH``. Resolution is cache-first and falls back to scanning the
remote listing page by page:

1. Strip one leading ``#`` (conversations) or ``@`` (users).
2. Anything shaped like an ID is returned as-is, without a request.
3. The cached set is searched for an exact name match, regardless of age:
   names map to stable IDs, so an old row is still a good answer.
4. Otherwise the remote listing is paginated, stopping at the first page
   with a match. Each page is cached on the way, so later lookups are local.
"""

from __future__ import annotations

from typing import Any

from clack.api.context import ClientContext
from clack.api.conversations import get_conversation
from clack.api.pagination import paginate
from clack.cache.freshness import INFINITE_TTL, EntityKind
from clack.exceptions import AmbiguousNameError, ApiError, NotFoundError
from clack.models import ConversationsListResponse, User, UsersListResponse
from clack.output import get_output

_CONVERSATION_ID_PREFIXES = ("C", "D", "G")
_USER_ID_PREFIXES = ("U", "W")


def looks_like_conversation_id(value: str) -> bool:
    return len(value) > 1 and value.startswith(_CONVERSATION_ID_PREFIXES)


def looks_like_user_id(value: str) -> bool:
    return len(value) > 1 and value.startswith(_USER_ID_PREFIXES)


def resolve_conversation(ctx: ClientContext, identifier: str, validate: bool = False) -> str:
    """Resolve a conversation ID, ``#name`` or bare name to an ID.

    Args:
        ctx: The access context.
        identifier: What the user typed.
        validate: Confirm an ID-shaped identifier exists before trusting it.
            If the lookup fails the identifier is treated as a name instead.

    Raises:
        NotFoundError: No conversation with that name is visible to the token.
    """
    name = identifier[1:] if identifier.startswith("#") else identifier

    if looks_like_conversation_id(name):
        if not validate:
            return name
        try:
            return get_conversation(ctx, name).id
        except (ApiError, NotFoundError) as exc:
            get_output().debug(f"{name} is not a valid conversation ID ({exc}); searching by name")

    cached = ctx.read_all(EntityKind.CONVERSATIONS, ttl_override=INFINITE_TTL)
    if cached:
        for conv in cached:
            if conv.name == name:
                get_output().debug(f"Resolved #{name} -> {conv.id} from cache")
                return conv.id

    scanned = 0
    pages = paginate(
        ctx,
        "conversations.list",
        {"types": "public_channel,private_channel", "exclude_archived": True},
        ConversationsListResponse,
        "channels",
        kind=EntityKind.CONVERSATIONS,
    )
    for page in pages:
        scanned += len(page)
        for conv in page:
            if conv.name == name:
                return conv.id

    raise NotFoundError(
        f"Channel '{name}' not found.\n\n"
        "Possible reasons:\n"
        "1. The channel is private and the token's user is not a member\n"
        "2. The token lacks required scopes (channels:read, groups:read)\n"
        "3. The channel name is misspelled\n\n"
        f"Searched through {scanned} channels. Try 'clack conversations list' "
        "to see the full list."
    )


def resolve_user(ctx: ClientContext, identifier: str) -> str:
    """Resolve a user ID, ``@handle`` or bare handle to an ID.

    Raises:
        AmbiguousNameError: Several cached users share the handle.
        NotFoundError: No user with that handle exists.
    """
    name = identifier[1:] if identifier.startswith("@") else identifier

    if looks_like_user_id(name):
        return name

    cached = ctx.read_all(EntityKind.USERS, ttl_override=INFINITE_TTL)
    if cached:
        matches = [user for user in cached if user.name == name]
        if len(matches) > 1:
            raise AmbiguousNameError(_ambiguous_message(name, matches))
        if matches:
            get_output().debug(f"Resolved @{name} -> {matches[0].id} from cache")
            return matches[0].id

    scanned = 0
    for page in paginate(
        ctx, "users.list", None, UsersListResponse, "members",
        kind=EntityKind.USERS,
    ):
        scanned += len(page)
        for user in page:
            if user.name == name:
                return user.id

    raise NotFoundError(
        f"User '{name}' not found.\n\n"
        "Possible reasons:\n"
        "1. The handle is misspelled (handles are not display names)\n"
        "2. The token lacks the users:read scope\n"
        "3. The user belongs to another workspace\n\n"
        f"Searched through {scanned} users. Try 'clack users list' to see the full list."
    )


def _ambiguous_message(name: str, matches: list[Any]) -> str:
    lines = [f"Multiple users match '{name}':", ""]
    for user in matches:
        assert isinstance(user, User)
        label = user.profile.display_name or user.real_name or "-"
        lines.append(f"  {user.id}  @{user.name}  ({label})")
    lines.append("")
    lines.append("Please specify the user by exact ID instead.")
    return "\n".join(lines)
