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

from typing import assert_never

from ..core.models import Cell, Label, LayoutResult, PageLayout, Placement, Rect
from .geometry import COORDINATE_EPSILON, Cursor
from .text import MeasurementProvider, widest_line

MIN_FONT_SIZE = 1.0
# no QR code is laid out smaller than this share of the cell's smaller side
MIN_QR_FRACTION = 0.1

__all__ = ["MIN_FONT_SIZE", "MIN_QR_FRACTION", "layout_cell", "min_qr_size"]


def min_qr_size(cell: Cell, placement: Placement, min_qr_size_percentage: float) -> float:
    """Smallest acceptable QR edge, measured along the stacking axis."""
    if placement.is_vertical:
        relevant = cell.height
    else:
        relevant = cell.width
    return min(relevant * min_qr_size_percentage / 100.0, cell.smallest)


def _fit_vertical(
    cell: Cell,
    caption: str,
    font_size: float,
    minimum: float,
    measure: MeasurementProvider,
) -> tuple[float, list[str], float, bool]:
    """Shrink the font until the QR code above or below the caption reaches minimum."""
    line_height = measure.line_height(font_size)
    lines = measure.wrap_text(caption, cell.width, font_size)
    qr_size = min(cell.smallest, cell.height - len(lines) * line_height)

    while qr_size < minimum and font_size > MIN_FONT_SIZE:
        font_size = max(MIN_FONT_SIZE, font_size - 1)
        line_height = measure.line_height(font_size)
        lines = measure.wrap_text(caption, cell.width, font_size)
        qr_size = min(cell.smallest, cell.height - len(lines) * line_height)

    overflow = qr_size < minimum - COORDINATE_EPSILON
    if overflow:
        qr_size = minimum
    return max(0.0, qr_size), lines, font_size, overflow


def _fit_horizontal(
    cell: Cell,
    caption: str,
    font_size: float,
    minimum: float,
    measure: MeasurementProvider,
) -> tuple[float, list[str], float, bool]:
    """Trade QR width against caption width until the caption fits the cell height."""

    def width_at(size: float):
        return lambda text: measure.string_width(text, size)

    qr_size = cell.smallest
    lines = measure.wrap_text(caption, cell.width - qr_size, font_size)

    # font size strictly decreases, so the base size bounds the iterations
    for _ in range(int(font_size) + 1):
        longest = widest_line(lines, width_at(font_size))
        qr_size = min(cell.smallest, max(minimum, cell.width - longest))
        if len(lines) * measure.line_height(font_size) <= cell.height + COORDINATE_EPSILON:
            break
        if font_size <= MIN_FONT_SIZE:
            break
        font_size = max(MIN_FONT_SIZE, font_size - 1)
        lines = measure.wrap_text(caption, cell.width - qr_size, font_size)

    caption_width = cell.width - qr_size
    if widest_line(lines, width_at(font_size)) > caption_width + COORDINATE_EPSILON:
        lines = measure.wrap_text(caption, caption_width, font_size)

    text_height = len(lines) * measure.line_height(font_size)
    overflow = text_height > cell.height + COORDINATE_EPSILON
    return qr_size, lines, font_size, overflow


def _place(
    cell: Cell,
    placement: Placement,
    qr_size: float,
    text_height: float,
) -> tuple[Rect, Rect]:
    """Cell-relative QR and caption rectangles.

    The QR code sits against the edge opposite the caption and is centered on
    the cross axis. The caption is centered inside the band left next to it.
    """
    if placement is Placement.TOP:
        band = cell.height - qr_size
        qr = Rect((cell.width - qr_size) / 2, band, qr_size, qr_size)
        caption = Rect(0.0, (band - text_height) / 2, cell.width, text_height)
    elif placement is Placement.BOTTOM:
        band = cell.height - qr_size
        qr = Rect((cell.width - qr_size) / 2, 0.0, qr_size, qr_size)
        caption = Rect(0.0, qr_size + (band - text_height) / 2, cell.width, text_height)
    elif placement is Placement.LEFT:
        band = cell.width - qr_size
        qr = Rect(band, (cell.height - qr_size) / 2, qr_size, qr_size)
        caption = Rect(0.0, (cell.height - text_height) / 2, band, text_height)
    elif placement is Placement.RIGHT:
        band = cell.width - qr_size
        qr = Rect(0.0, (cell.height - qr_size) / 2, qr_size, qr_size)
        caption = Rect(qr_size, (cell.height - text_height) / 2, band, text_height)
    else:
        assert_never(placement)
    return qr, caption


def layout_cell(
    page_layout: PageLayout,
    label: Label,
    min_qr_size_percentage: float,
    cursor: Cursor,
    measure: MeasurementProvider,
) -> LayoutResult:
    """Compute where the QR code and the caption of one label go inside its cell.

    The font is shrunk one point at a time, down to ``MIN_FONT_SIZE``, until the
    caption and a QR code of at least the minimum size fit together. When even
    the smallest font does not fit, the result is flagged ``overflow`` and the
    caption is allowed to spill out of the cell; this is not an error.
    A percentage too small to matter is raised to ``MIN_QR_FRACTION`` of the
    smaller cell side, so every label keeps a visible QR code.

    Positions in the result are absolute page coordinates, offset by ``cursor``.
    The label itself is never modified; the wrapped caption is returned in
    ``caption_lines``.
    """
    cell = page_layout.cell
    placement = page_layout.placement
    base_font_size = float(page_layout.font_size)
    minimum = max(
        min_qr_size(cell, placement, min_qr_size_percentage), cell.smallest * MIN_QR_FRACTION
    )

    if not label.caption:
        qr_size, lines, font_size, overflow = cell.smallest, [], base_font_size, False
    elif placement.is_vertical:
        qr_size, lines, font_size, overflow = _fit_vertical(
            cell, label.caption, base_font_size, minimum, measure
        )
    else:
        qr_size, lines, font_size, overflow = _fit_horizontal(
            cell, label.caption, base_font_size, minimum, measure
        )

    line_height = measure.line_height(font_size)
    text_height = len(lines) * line_height
    qr_rect, caption_rect = _place(cell, placement, qr_size, text_height)

    return LayoutResult(
        qr_rect=qr_rect.translated(cursor.x, cursor.y),
        caption_rect=caption_rect.translated(cursor.x, cursor.y),
        caption_lines=tuple(lines),
        font_size=font_size,
        base_font_size=base_font_size,
        line_height=line_height,
        cell_margin=min(cell.height - qr_size, cell.width - qr_size),
        overflow=overflow,
    )
