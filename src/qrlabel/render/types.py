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

from dataclasses import dataclass, field
from typing import Literal

from ..core.models import Label, LayoutResult, PageLayout
from ..qr.codec import QrConfig
from .geometry import Cursor
from .text import DEFAULT_FONT_FAMILY

OnEncodeError = Literal["skip", "abort"]


@dataclass(frozen=True)
class SheetConfig:
    layout: PageLayout
    qr_config: QrConfig = field(default_factory=QrConfig)
    min_qr_size_percentage: float = 40.0
    border: bool = False
    font_family: str = DEFAULT_FONT_FAMILY
    font_path: str | None = None
    on_encode_error: OnEncodeError = "skip"
    render_jobs: int | Literal["auto"] | None = None


@dataclass(frozen=True)
class PlacedLabel:
    index: int
    label: Label
    cursor: Cursor
    layout: LayoutResult


@dataclass(frozen=True)
class SkippedLabel:
    index: int
    label: Label
    reason: str


@dataclass(frozen=True)
class SheetResult:
    output_path: str
    pages: int
    labels_per_page: int
    placed: tuple[PlacedLabel, ...]
    skipped: tuple[SkippedLabel, ...]

    @property
    def degraded(self) -> tuple[PlacedLabel, ...]:
        return tuple(item for item in self.placed if item.layout.overflow)
