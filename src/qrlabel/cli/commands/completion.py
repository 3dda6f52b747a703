#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import typer
from typer.completion import Shells, completion_init, get_completion_script

from ..core.common import _ctx_value, _run_cli
from ..ui import console

PROG_NAME = "qrlabel"
COMPLETE_VAR = "_QRLABEL_COMPLETE"

_COMPLETION_HELP = (
    "Print a shell completion script.\n\n"
    "Examples:\n"
    "  qrlabel completion bash > ~/.local/share/bash-completion/completions/qrlabel\n"
    "  qrlabel completion zsh > \"${fpath[1]}/_qrlabel\"\n"
    "  qrlabel completion fish > ~/.config/fish/completions/qrlabel.fish\n"
    "  qrlabel completion powershell >> $PROFILE\n"
)


def register(app: typer.Typer) -> None:
    # The scripts call back into the app with COMPLETE_VAR set; typer's
    # completion classes must be registered to answer those requests.
    completion_init()
    app.command(help=_COMPLETION_HELP)(completion)


def completion(
    ctx: typer.Context,
    shell: Shells = typer.Argument(..., help="Shell to generate the script for."),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        console.out(completion_script(shell), highlight=False)

    _run_cli(_run, debug=debug_value)


def completion_script(shell: Shells | str) -> str:
    name = shell.value if isinstance(shell, Shells) else str(shell)
    return get_completion_script(prog_name=PROG_NAME, complete_var=COMPLETE_VAR, shell=name)
