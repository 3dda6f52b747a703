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

import math

from .models import PageLayout, normalize_page_size, normalize_unit

ON_ENCODE_ERROR_POLICIES = ("skip", "abort")


def require_positive(value: float, *, label: str) -> float:
    """Validate that value is a finite number greater than zero."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValueError(f"{label} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{label} must be greater than zero (got {value})")
    return float(value)


def require_positive_int(value: int, *, label: str) -> int:
    """Validate that value is an integer greater than zero."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{label} must be an integer")
    if value <= 0:
        raise ValueError(f"{label} must be greater than zero (got {value})")
    return value


def validate_percentage(value: float, *, label: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"{label} must be a number")
    if value < 0 or value > 100:
        raise ValueError(f"{label} must be between 0 and 100 (got {value})")
    return float(value)


def validate_on_encode_error(value: str) -> str:
    policy = value.strip().lower()
    if policy not in ON_ENCODE_ERROR_POLICIES:
        raise ValueError(f"on_encode_error must be 'skip' or 'abort' (got {value!r})")
    return policy


def validate_page_layout(layout: PageLayout) -> None:
    """Reject configurations that cannot produce a sheet before any rendering starts."""
    require_positive(layout.cell.width, label="cell width")
    require_positive(layout.cell.height, label="cell height")
    require_positive_int(layout.rows, label="rows")
    require_positive_int(layout.cols, label="cols")
    normalize_unit(layout.unit)
    if layout.font_size < 1:
        raise ValueError(f"font size must be at least 1 (got {layout.font_size})")

    has_width = layout.page_width is not None
    has_height = layout.page_height is not None
    if has_width != has_height:
        raise ValueError("page width and page height must be set together")
    if has_width:
        if layout.page_size:
            raise ValueError("use either a page size or explicit page dimensions, not both")
        require_positive(float(layout.page_width or 0), label="page width")
        require_positive(float(layout.page_height or 0), label="page height")
    else:
        if not layout.page_size:
            raise ValueError("a page size or explicit page dimensions are required")
        normalize_page_size(layout.page_size)
