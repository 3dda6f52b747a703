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

from collections.abc import Callable
from typing import Protocol

from fpdf import FPDF

DEFAULT_FONT_FAMILY = "helvetica"
# the built-in PDF fonts use WinAnsiEncoding
CORE_FONTS_ENCODING = "cp1252"


class MeasurementProvider(Protocol):
    """Font metrics needed by the cell layout engine."""

    def string_width(self, text: str, font_size: float) -> float: ...

    def wrap_text(self, text: str, max_width: float, font_size: float) -> list[str]: ...

    def line_height(self, font_size: float) -> float: ...


def wrap_lines_to_width(
    text: str,
    max_width: float,
    string_width: Callable[[str], float],
) -> list[str]:
    """Greedy word wrap; words wider than max_width are broken by character."""
    if not text:
        return []
    wrapped: list[str] = []
    for line in text.splitlines():
        if not line:
            wrapped.append("")
            continue
        words = line.split(" ")
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if string_width(candidate) <= max_width:
                current = candidate
                continue
            if current:
                wrapped.append(current)
                current = ""
            if string_width(word) <= max_width:
                current = word
                continue
            parts: list[str] = []
            chunk = ""
            for ch in word:
                next_chunk = f"{chunk}{ch}"
                if chunk and string_width(next_chunk) > max_width:
                    parts.append(chunk)
                    chunk = ch
                else:
                    chunk = next_chunk
            if chunk:
                parts.append(chunk)
            wrapped.extend(parts[:-1])
            current = parts[-1] if parts else ""
        if current:
            wrapped.append(current)
    return wrapped


def widest_line(lines: list[str] | tuple[str, ...], string_width: Callable[[str], float]) -> float:
    if not lines:
        return 0.0
    return max(string_width(line) for line in lines)


class FpdfMeasurement:
    """MeasurementProvider backed by the fonts of an FPDF document.

    Measuring switches the document's current font size, so callers that draw
    text afterwards must set the size they want explicitly.
    """

    def __init__(self, pdf: FPDF) -> None:
        self._pdf = pdf
        # text cells are drawn without padding, widths must not include it either
        self._pdf.c_margin = 0

    def _use_size(self, font_size: float) -> None:
        if self._pdf.font_size_pt != font_size:
            self._pdf.set_font_size(font_size)

    def string_width(self, text: str, font_size: float) -> float:
        self._use_size(font_size)
        return float(self._pdf.get_string_width(text))

    def wrap_text(self, text: str, max_width: float, font_size: float) -> list[str]:
        self._use_size(font_size)
        return wrap_lines_to_width(text, max_width, self._pdf.get_string_width)

    def line_height(self, font_size: float) -> float:
        return float(font_size) / self._pdf.k


def setup_font(pdf: FPDF, *, family: str, font_path: str | None, size: float) -> str:
    """Select the caption font, registering a TrueType file when one is given."""
    if font_path:
        pdf.add_font(family, "", font_path)
    else:
        pdf.core_fonts_encoding = CORE_FONTS_ENCODING
    pdf.set_font(family, size=size)
    return family
