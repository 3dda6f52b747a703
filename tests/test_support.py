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

import os
from contextlib import contextmanager
from unittest import mock

from qrlabel.core.models import Cell, Label, PageLayout, Placement
from qrlabel.render.geometry import Cursor
from qrlabel.render.text import wrap_lines_to_width

# =============================================================================
# Test Constants
# =============================================================================

DEFAULT_CELL = Cell(38.0, 21.2)
ORIGIN = Cursor(x=0.0, y=0.0)


# =============================================================================
# Fakes
# =============================================================================


class FakeMeasurement:
    """Monospaced metrics: every character is ``char_width * font_size`` wide."""

    def __init__(self, *, char_width: float = 0.2, line_factor: float = 0.4) -> None:
        self.char_width = char_width
        self.line_factor = line_factor

    def string_width(self, text: str, font_size: float) -> float:
        return len(text) * self.char_width * font_size

    def wrap_text(self, text: str, max_width: float, font_size: float) -> list[str]:
        return wrap_lines_to_width(
            text, max_width, lambda value: self.string_width(value, font_size)
        )

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_factor


# =============================================================================
# Builders
# =============================================================================


def make_layout(
    *,
    cell: Cell = DEFAULT_CELL,
    rows: int = 10,
    cols: int = 5,
    placement: Placement = Placement.RIGHT,
    font_size: float = 10.0,
    **overrides,
) -> PageLayout:
    return PageLayout(
        cell=cell,
        rows=rows,
        cols=cols,
        placement=placement,
        font_size=font_size,
        **overrides,
    )


def make_labels(count: int, *, prefix: str = "item") -> list[Label]:
    return [
        Label(content=f"{prefix}-{index}", caption=f"{prefix} {index}") for index in range(count)
    ]


# =============================================================================
# Environment Helpers
# =============================================================================


@contextmanager
def temp_env(overrides: dict[str, str], *, clear: bool = False):
    with mock.patch.dict(os.environ, overrides, clear=clear):
        yield


@contextmanager
def without_env(*names: str):
    with mock.patch.dict(os.environ):
        for name in names:
            os.environ.pop(name, None)
        yield

