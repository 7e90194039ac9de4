"""Workspace session: establishes which workspace the token belongs to.

The workspace ID partitions the local cache, so it must be known before any
cache read or write. :meth:`WorkspaceSession.init` asks ``auth.test`` once
and keeps the resulting immutable :class:`~clack.models.Workspace`.
"""

from __future__ import annotations

from typing import Optional

from clack.api.context import DEFAULT_PAGE_SIZE, ClientContext
from clack.cache.freshness import FreshnessPolicy
from clack.cache.store import LocalStore
from clack.client.dispatcher import Dispatcher
from clack.exceptions import WorkspaceNotInitializedError
from clack.models import AuthTestResponse, Workspace
from clack.output import get_output


class WorkspaceSession:
    """Holds the workspace identity for one dispatcher.

    Args:
        dispatcher: An open :class:`~clack.client.dispatcher.Dispatcher`.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self._workspace: Optional[Workspace] = None

    @property
    def is_initialized(self) -> bool:
        return self._workspace is not None

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            raise WorkspaceNotInitializedError()
        return self._workspace

    @property
    def workspace_id(self) -> str:
        """The team ID.

        Raises:
            WorkspaceNotInitializedError: If :meth:`init` has not completed.
        """
        return self.workspace.team_id

    def init(self) -> Workspace:
        """Call ``auth.test`` on first use; later calls return the same identity."""
        if self._workspace is not None:
            return self._workspace

        response = self._dispatcher.call("auth.test", None, AuthTestResponse)
        self._workspace = Workspace.model_validate(response.model_dump(exclude={"ok"}))
        get_output().debug(f"Workspace: {self._workspace.team} ({self._workspace.team_id})")
        return self._workspace

    def context(
        self,
        store: Optional[LocalStore] = None,
        policy: Optional[FreshnessPolicy] = None,
        refresh: bool = False,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ClientContext:
        """Initialise if needed and return the context operations run against."""
        workspace = self.init()
        return ClientContext(
            dispatcher=self._dispatcher,
            workspace=workspace,
            policy=policy or FreshnessPolicy(),
            store=store,
            refresh=refresh,
            page_size=page_size,
        )
