"""Built-in CLI sub-commands for clack.

Each module exports one :class:`typer.Typer` sub-application registered on
the root app in :mod:`clack.app`:

* :mod:`~clack.commands.auth` -- check the token and show the workspace.
* :mod:`~clack.commands.users` -- list users, show users and profiles.
* :mod:`~clack.commands.conversations` -- channels, history, threads, members.
* :mod:`~clack.commands.search` -- message, file and channel search, and the
  polling search stream.
* :mod:`~clack.commands.pins`, :mod:`~clack.commands.reactions`,
  :mod:`~clack.commands.chat` -- write operations.
* :mod:`~clack.commands.files` -- list and inspect files.
* :mod:`~clack.commands.cache` -- inspect and clear the local cache.
* :mod:`~clack.commands.config` -- view and modify global settings.
"""
