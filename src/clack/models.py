"""Canonical Pydantic models shared across all clack modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`CacheConfig`, and
    :class:`GlobalConfig`.

**Records** -- the typed entities returned to callers and snapshotted into the
local cache: :class:`User`, :class:`Conversation`, :class:`Message`,
:class:`PinItem`, :class:`File`, and the :class:`Workspace` identity.

**Response envelopes** -- one model per endpoint shape, validated by the
dispatcher after the generic ``{ok, error}`` envelope has been checked.

Records use ``extra="allow"`` so that fields the API returns but clack does
not model survive a round trip through the cache snapshot unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Retries allowed on HTTP 429")
    page_size: int = Field(default=200, description="Page size for cursor listings")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, yaml, plain, rich"
    )


class CacheConfig(BaseModel):
    """Local cache settings stored in :class:`GlobalConfig`.

    Each entity kind has its own time-to-live. A user's handle or a channel
    name changes far less often than message content, so the values are kept
    separate even though they share the same default.
    """

    enabled: bool = Field(default=True, description="Enable the local cache")
    users_ttl_seconds: int = Field(default=7 * 24 * 3600, description="User TTL")
    conversations_ttl_seconds: int = Field(
        default=7 * 24 * 3600, description="Conversation TTL"
    )
    messages_ttl_seconds: int = Field(default=7 * 24 * 3600, description="Message TTL")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/clack/config.json``.

    Loaded and saved by :func:`~clack.config.load_global_config` and
    :func:`~clack.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or CLI
    flags. See :func:`~clack.config.resolve_config` for the full chain.
    """

    base_url: str = Field(default="https://slack.com/api")
    token_source: str = Field(
        default="env:SLACK_TOKEN",
        description="Token source: env:VAR, file:/path, prompt",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


# --- Records ---


class UserProfile(BaseModel):
    """The ``profile`` object nested in a user record."""

    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    display_name: Optional[str] = None
    real_name: Optional[str] = None
    status_emoji: Optional[str] = None
    status_text: Optional[str] = None
    image_72: Optional[str] = None


class User(BaseModel):
    """A workspace member as returned by ``users.list`` and ``users.info``."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    real_name: Optional[str] = None
    profile: UserProfile = Field(default_factory=UserProfile)
    deleted: bool = False
    is_bot: bool = False
    is_admin: Optional[bool] = None
    is_owner: Optional[bool] = None
    tz: Optional[str] = None

    @property
    def display_label(self) -> str:
        """Best human-facing name: display name, then real name, then handle."""
        return self.profile.display_name or self.real_name or self.name


class TextValue(BaseModel):
    """A conversation topic or purpose."""

    model_config = ConfigDict(extra="allow")

    value: str = ""


class Conversation(BaseModel):
    """A channel, private group, IM or MPIM."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    is_channel: Optional[bool] = None
    is_group: Optional[bool] = None
    is_im: Optional[bool] = None
    is_mpim: Optional[bool] = None
    is_private: Optional[bool] = None
    is_archived: Optional[bool] = None
    topic: Optional[TextValue] = None
    purpose: Optional[TextValue] = None
    num_members: Optional[int] = None
    user: Optional[str] = None


class Reaction(BaseModel):
    """An emoji reaction attached to a message."""

    model_config = ConfigDict(extra="allow")

    name: str
    count: int = 0
    users: list[str] = Field(default_factory=list)


class MessageChannel(BaseModel):
    """The channel reference carried by search matches."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None


class Message(BaseModel):
    """A message or thread reply, keyed by its ``ts`` within a conversation."""

    model_config = ConfigDict(extra="allow")

    ts: str
    user: Optional[str] = None
    text: str = ""
    thread_ts: Optional[str] = None
    reply_count: Optional[int] = None
    reactions: Optional[list[Reaction]] = None
    permalink: Optional[str] = None
    channel: Optional[MessageChannel] = None


class PinItem(BaseModel):
    """An item pinned to a conversation."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    channel: Optional[str] = None
    created: Optional[int] = None
    created_by: Optional[str] = None
    pin_type: str = Field(default="message", alias="type")
    message: Optional[Message] = None


class File(BaseModel):
    """A file shared in the workspace."""

    model_config = ConfigDict(extra="allow")

    id: str
    created: Optional[int] = None
    timestamp: Optional[int] = None
    name: Optional[str] = None
    title: Optional[str] = None
    mimetype: Optional[str] = None
    filetype: Optional[str] = None
    pretty_type: Optional[str] = None
    user: Optional[str] = None
    size: Optional[int] = None
    url_private: Optional[str] = None
    permalink: Optional[str] = None
    channels: Optional[list[str]] = None


class Workspace(BaseModel):
    """Identity returned by ``auth.test``; the partition key for the cache.

    Instances are frozen: a workspace identity is established once per
    client and never mutated afterwards.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    team_id: str
    team: str = ""
    user: str = ""
    user_id: str = ""
    url: str = ""
    bot_id: Optional[str] = None
    is_enterprise_install: Optional[bool] = None


# --- Response envelopes ---


class Envelope(BaseModel):
    """The generic envelope every API response shares."""

    ok: bool = False
    error: Optional[str] = None
    needed: Optional[str] = None
    provided: Optional[str] = None


class ResponseMetadata(BaseModel):
    next_cursor: Optional[str] = None


class ApiResponse(BaseModel):
    """Base for endpoint-specific response shapes."""

    ok: bool = True


class PagedResponse(ApiResponse):
    """A response from a cursor-paginated listing endpoint."""

    response_metadata: Optional[ResponseMetadata] = None

    @property
    def next_cursor(self) -> Optional[str]:
        """The cursor for the next page, or ``None`` when this is the last page."""
        if self.response_metadata is None:
            return None
        return self.response_metadata.next_cursor or None


class AuthTestResponse(Workspace):
    ok: bool = True


class UsersListResponse(PagedResponse):
    members: list[User] = Field(default_factory=list)


class UserInfoResponse(ApiResponse):
    user: User


class UserProfileResponse(ApiResponse):
    profile: UserProfile


class ConversationsListResponse(PagedResponse):
    channels: list[Conversation] = Field(default_factory=list)


class ConversationInfoResponse(ApiResponse):
    channel: Conversation


class ConversationMembersResponse(PagedResponse):
    members: list[str] = Field(default_factory=list)


class MessagesResponse(PagedResponse):
    messages: list[Message] = Field(default_factory=list)
    has_more: Optional[bool] = None


class SearchPagination(BaseModel):
    total_count: int = 0
    page: int = 1
    per_page: int = 0
    page_count: int = 0
    first: int = 0
    last: int = 0


class SearchMessagesMatches(BaseModel):
    total: int = 0
    matches: list[Message] = Field(default_factory=list)
    pagination: Optional[SearchPagination] = None


class SearchFilesMatches(BaseModel):
    total: int = 0
    matches: list[File] = Field(default_factory=list)
    pagination: Optional[SearchPagination] = None


class SearchMessagesResponse(ApiResponse):
    query: str = ""
    messages: SearchMessagesMatches = Field(default_factory=SearchMessagesMatches)


class SearchFilesResponse(ApiResponse):
    query: str = ""
    files: SearchFilesMatches = Field(default_factory=SearchFilesMatches)


class SearchAllResponse(ApiResponse):
    query: str = ""
    messages: SearchMessagesMatches = Field(default_factory=SearchMessagesMatches)
    files: SearchFilesMatches = Field(default_factory=SearchFilesMatches)


class PinsListResponse(ApiResponse):
    items: list[PinItem] = Field(default_factory=list)


class ChatPostResponse(ApiResponse):
    channel: Optional[str] = None
    ts: Optional[str] = None
    message: Optional[dict[str, Any]] = None


class FilesPaging(BaseModel):
    count: int = 0
    total: int = 0
    page: int = 1
    pages: int = 1


class FilesListResponse(ApiResponse):
    files: list[File] = Field(default_factory=list)
    paging: Optional[FilesPaging] = None


class FileInfoResponse(ApiResponse):
    file: File
