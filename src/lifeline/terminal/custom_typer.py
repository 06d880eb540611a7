# SPDX-License-Identifier: MIT

import re
from typing import Any, Optional

import click
import typer.core


class AliasedTyperGroup(typer.core.TyperGroup):
    """
    TyperGroup whose registered command names carry their aliases, e.g.
    "add, a". Any alias resolves to the command; help lists commands in the
    order they were registered.
    """

    _ALIAS_SPLIT_P = re.compile(r" ?, ?")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._alias_index: dict[str, str] = {}
        super().__init__(*args, **kwargs)
        for registered_name in self.commands:
            self._index_aliases(registered_name)

    def _index_aliases(self, registered_name: str) -> None:
        for alias in self._ALIAS_SPLIT_P.split(registered_name):
            owner = self._alias_index.get(alias)
            if owner is not None and owner != registered_name:
                raise ValueError(
                    f"Alias '{alias}' of '{registered_name}' is already used by '{owner}'"
                )
            self._alias_index[alias] = registered_name

    def add_command(self, cmd: click.Command, name: Optional[str] = None) -> None:
        super().add_command(cmd, name)
        registered_name = name or cmd.name
        if registered_name:
            self._index_aliases(registered_name)

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self._alias_index.get(cmd_name, cmd_name))

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
