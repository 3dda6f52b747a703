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

import sys
from pathlib import Path

from ...core.models import Label


def read_label_text(path: str | Path | None) -> str:
    """Read label lines from a file, or from stdin when no path (or ``-``) is given."""
    if path is None or str(path) == "-":
        if sys.stdin is None or sys.stdin.isatty():
            raise ValueError("no input: pass --input or pipe label lines on stdin")
        return sys.stdin.read()
    resolved = Path(path).expanduser()
    if not resolved.is_file():
        raise ValueError(f"input file not found: {resolved}")
    return resolved.read_text(encoding="utf-8")


def parse_labels(text: str, separator: str) -> list[Label]:
    """Parse ``content<separator>caption`` lines into labels.

    Each line is split at the first separator only. A line without a separator
    uses its content as the caption too. Blank lines are skipped.
    """
    if not separator:
        raise ValueError("separator cannot be empty")
    labels: list[Label] = []
    for line_no, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        if not line.strip():
            continue
        content, found, caption = line.partition(separator)
        if not content:
            raise ValueError(f"line {line_no}: QR code content is empty")
        labels.append(Label(content=content, caption=caption if found else content))
    return labels
