"""Auth commands -- verify the configured token.

Typical workflow::

    export SLACK_TOKEN=xoxb-...
    clack auth test
"""

from __future__ import annotations

import typer

from clack.output import format_response, success
from clack.runtime import open_client, wants_structured


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("test")
def auth_test(ctx: typer.Context) -> None:
    """Check the token with ``auth.test`` and show the workspace it belongs to.

    Example::

        clack auth test
        clack --json auth test
    """
    with open_client(ctx) as client:
        workspace = client.workspace

    if not wants_structured():
        success(f"Authenticated as {workspace.user} in {workspace.team}")
    format_response(workspace)
