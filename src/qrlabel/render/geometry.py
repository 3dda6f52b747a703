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

from dataclasses import dataclass

from ..core.models import Cell, PageLayout

COORDINATE_EPSILON = 0.01


@dataclass(frozen=True)
class Cursor:
    x: float
    y: float
    page: int = 1
    row: int = 0
    col: int = 0


@dataclass(frozen=True)
class PageGeometry:
    page_w: float
    page_h: float
    margin_w: float
    margin_h: float
    cell: Cell

    @classmethod
    def for_page(cls, page_w: float, page_h: float, layout: PageLayout) -> PageGeometry:
        cell = layout.cell
        if cell.width > page_w + COORDINATE_EPSILON or cell.height > page_h + COORDINATE_EPSILON:
            raise ValueError(
                f"label cell {cell.width:g}x{cell.height:g} does not fit on a "
                f"{page_w:g}x{page_h:g} {layout.unit} page"
            )
        margin_w = max(0.0, (page_w - layout.cols * cell.width) / 2)
        margin_h = max(0.0, (page_h - layout.rows * cell.height) / 2)
        return cls(page_w=page_w, page_h=page_h, margin_w=margin_w, margin_h=margin_h, cell=cell)

    @property
    def content_right(self) -> float:
        return self.page_w - self.margin_w

    @property
    def content_bottom(self) -> float:
        return self.page_h - self.margin_h

    def origin(self, page: int = 1) -> Cursor:
        return Cursor(x=self.margin_w, y=self.margin_h, page=page)

    def columns_per_row(self) -> int:
        usable = self.content_right - self.margin_w
        return max(1, int((usable + COORDINATE_EPSILON) // self.cell.width))

    def rows_per_page(self) -> int:
        usable = self.content_bottom - self.margin_h
        return max(1, int((usable + COORDINATE_EPSILON) // self.cell.height))


@dataclass(frozen=True)
class FlowStep:
    cursor: Cursor
    row_break: bool = False
    page_break: bool = False


def advance_cursor(cursor: Cursor, geometry: PageGeometry) -> FlowStep:
    """Move past the cell just drawn, wrapping to a new row or page when full.

    A page break only follows a row break. The returned cursor on a page break
    already points at the next page; opening that page is left to the caller so
    that a sheet whose last page is exactly full gets no trailing blank page.
    """
    cell = geometry.cell
    x = cursor.x + cell.width
    if x + cell.width <= geometry.content_right + COORDINATE_EPSILON:
        next_cursor = Cursor(x=x, y=cursor.y, page=cursor.page, row=cursor.row, col=cursor.col + 1)
        return FlowStep(next_cursor)

    y = cursor.y + cell.height
    if y + cell.height <= geometry.content_bottom + COORDINATE_EPSILON:
        next_cursor = Cursor(x=geometry.margin_w, y=y, page=cursor.page, row=cursor.row + 1, col=0)
        return FlowStep(next_cursor, row_break=True)

    return FlowStep(geometry.origin(cursor.page + 1), row_break=True, page_break=True)
