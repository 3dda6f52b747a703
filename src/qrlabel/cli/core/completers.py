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

from ...core.models import PAGE_SIZES, UNITS, Placement, RecoveryLevel
from ...core.validation import ON_ENCODE_ERROR_POLICIES

_UNIT_HELP = {
    "pt": "points",
    "mm": "millimeters",
    "cm": "centimeters",
    "in": "inches",
}
_ON_ERROR_HELP = {
    "skip": "leave the label out and warn",
    "abort": "stop without writing the PDF",
}


def _matching(choices: list[tuple[str, str]], incomplete: str) -> list[tuple[str, str]]:
    prefix = incomplete.lower()
    return [(value, help_text) for value, help_text in choices if value.lower().startswith(prefix)]


def complete_unit(incomplete: str) -> list[tuple[str, str]]:
    return _matching([(unit, _UNIT_HELP[unit]) for unit in UNITS], incomplete)


def complete_page_size(incomplete: str) -> list[tuple[str, str]]:
    return _matching([(size.title(), "page size") for size in PAGE_SIZES], incomplete)


def complete_position(incomplete: str) -> list[tuple[str, str]]:
    return _matching([(member.value, member.name.lower()) for member in Placement], incomplete)


def complete_recovery_level(incomplete: str) -> list[tuple[str, str]]:
    return _matching(
        [(str(level.value), level.name.lower()) for level in RecoveryLevel], incomplete
    )


def complete_on_error(incomplete: str) -> list[tuple[str, str]]:
    return _matching(
        [(policy, _ON_ERROR_HELP[policy]) for policy in ON_ENCODE_ERROR_POLICIES], incomplete
    )
