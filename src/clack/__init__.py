"""clack -- a cache-aware command-line client for the Slack Web API.

The package is split into a thin Typer CLI and an access layer that sits
between the CLI and the remote API. The access layer keeps a local SQLite
cache coherent with the workspace: every successful read is written through,
reads are served from the cache while they are fresh, and human-friendly
names are resolved to IDs cache-first with a paginated remote fallback.

Typical workflow::

    export SLACK_TOKEN=xoxb-...
    clack conversations history '#general' --limit 20
    clack users info @alex

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for API records and configuration.
    config: XDG-aware configuration and token resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    client: The request dispatcher.
    cache: The local store and freshness policy.
    api: Workspace session, pagination, resolution and entity operations.
    stream: Polling search stream.
"""

__version__ = "0.3.0"
