"""The access layer between the CLI and the Slack Web API.

Start with a :class:`WorkspaceSession`, call :meth:`~WorkspaceSession.context`
to obtain a :class:`ClientContext`, and pass that context to the entity
operations in the submodules (:mod:`~clack.api.users`,
:mod:`~clack.api.conversations`, :mod:`~clack.api.messages`, ...).
"""

from clack.api.context import ClientContext
from clack.api.session import WorkspaceSession

__all__ = ["ClientContext", "WorkspaceSession"]
