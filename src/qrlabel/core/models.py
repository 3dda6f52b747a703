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
from enum import Enum, IntEnum

PAGE_SIZES = ("A3", "A4", "A5", "LETTER", "LEGAL")
UNITS = ("pt", "mm", "cm", "in")
_UNIT_ALIASES = {"inch": "in", "inches": "in"}


def normalize_unit(value: str) -> str:
    unit = value.strip().lower()
    unit = _UNIT_ALIASES.get(unit, unit)
    if unit not in UNITS:
        raise ValueError(f"unit must be one of {', '.join(UNITS)} (got {value!r})")
    return unit


def normalize_page_size(value: str) -> str:
    size = value.strip().upper()
    if size not in PAGE_SIZES:
        raise ValueError(f"page size must be one of A3, A4, A5, Letter, Legal (got {value!r})")
    return size


class Placement(str, Enum):
    """Caption position relative to its QR code."""

    TOP = "T"
    BOTTOM = "B"
    LEFT = "L"
    RIGHT = "R"

    @property
    def is_vertical(self) -> bool:
        return self in (Placement.TOP, Placement.BOTTOM)

    @classmethod
    def parse(cls, value: str | Placement) -> Placement:
        if isinstance(value, Placement):
            return value
        text = str(value).strip().upper()
        for member in cls:
            if text in (member.value, member.name):
                return member
        raise ValueError(f"placement must be one of T, B, L, R (got {value!r})")


class RecoveryLevel(IntEnum):
    """QR error correction strength, weakest first."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    HIGHEST = 3

    @property
    def segno_error(self) -> str:
        return _SEGNO_ERROR_LEVELS[self]

    @classmethod
    def parse(cls, value: int | str | RecoveryLevel) -> RecoveryLevel:
        if isinstance(value, RecoveryLevel):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"recovery level must be 0-3 (got {value})") from None
        text = str(value).strip()
        if text.isdigit():
            return cls.parse(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(
                f"recovery level must be 0-3 or low/medium/high/highest (got {value!r})"
            ) from None


_SEGNO_ERROR_LEVELS = {
    RecoveryLevel.LOW: "L",
    RecoveryLevel.MEDIUM: "M",
    RecoveryLevel.HIGH: "Q",
    RecoveryLevel.HIGHEST: "H",
}


@dataclass(frozen=True)
class Cell:
    width: float
    height: float

    @property
    def smallest(self) -> float:
        return min(self.width, self.height)


@dataclass(frozen=True)
class Label:
    content: str
    caption: str


@dataclass(frozen=True)
class PageLayout:
    cell: Cell
    rows: int
    cols: int
    unit: str = "mm"
    page_size: str | None = "A4"
    page_width: float | None = None
    page_height: float | None = None
    placement: Placement = Placement.RIGHT
    font_size: float = 10.0

    def page_format(self) -> str | tuple[float, float]:
        if self.page_width is not None and self.page_height is not None:
            return (float(self.page_width), float(self.page_height))
        return (self.page_size or "A4").lower()


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def translated(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class LayoutResult:
    qr_rect: Rect
    caption_rect: Rect
    caption_lines: tuple[str, ...]
    font_size: float
    base_font_size: float
    line_height: float
    cell_margin: float
    overflow: bool = False

    @property
    def qr_size(self) -> float:
        return self.qr_rect.width

    @property
    def font_reduced(self) -> bool:
        return self.font_size < self.base_font_size

    @property
    def has_caption(self) -> bool:
        return bool(self.caption_lines)
