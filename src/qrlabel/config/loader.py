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
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from ..core.models import (
    Cell,
    PageLayout,
    Placement,
    RecoveryLevel,
    normalize_page_size,
    normalize_unit,
)
from ..core.validation import validate_on_encode_error
from ..qr.codec import QrConfig
from ..render.text import DEFAULT_FONT_FAMILY
from ..render.types import OnEncodeError, SheetConfig
from .installer import resolve_config_path

DEFAULT_SEPARATOR = ";"


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class AppConfig:
    """Fully resolved settings for one render, before command-line overrides."""

    label_width: float = 38.0
    label_height: float = 21.2
    rows: int = 10
    cols: int = 5
    unit: str = "mm"
    page_size: str | None = "A4"
    page_width: float | None = None
    page_height: float | None = None
    placement: Placement = Placement.RIGHT
    font_size: float = 10.0
    font_family: str = DEFAULT_FONT_FAMILY
    font_path: str | None = None
    min_qr_size_percentage: float = 40.0
    border: bool = False
    recovery_level: RecoveryLevel = RecoveryLevel.MEDIUM
    qr_scale: int = 10
    qr_boost_error: bool = False
    separator: str = DEFAULT_SEPARATOR
    render_jobs: int | Literal["auto"] | None = None
    on_encode_error: OnEncodeError = "skip"
    ui: UiDefaults = field(default_factory=UiDefaults)
    source: Path | None = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    try:
        data = _load_toml(config_path)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"invalid config file {config_path}: {exc}") from exc
    return parse_app_config(data, source=config_path)


def parse_app_config(data: dict[str, object], *, source: Path | None = None) -> AppConfig:
    defaults = AppConfig()
    page_cfg = _get_dict(data, "page")
    label_cfg = _get_dict(data, "label")
    qr_cfg = _get_dict(data, "qr")
    input_cfg = _get_dict(data, "input")
    runtime_cfg = _get_dict(data, "runtime")

    page_width = _parse_optional_float(page_cfg.get("width"), field="page.width")
    page_height = _parse_optional_float(page_cfg.get("height"), field="page.height")
    if (page_width is None) != (page_height is None):
        raise ValueError("page.width and page.height must be set together")
    page_size_value = _parse_optional_str(page_cfg.get("size"), field="page.size")
    if page_width is not None:
        if page_size_value:
            raise ValueError("page.size cannot be combined with page.width and page.height")
        page_size = None
    else:
        page_size = normalize_page_size(page_size_value or cast(str, defaults.page_size))

    unit = normalize_unit(
        _parse_optional_str(page_cfg.get("unit"), field="page.unit") or defaults.unit
    )
    placement_value = _parse_optional_str(label_cfg.get("placement"), field="label.placement")
    recovery_value = qr_cfg.get("recovery_level")
    if recovery_value is not None and not isinstance(recovery_value, (int, str)):
        raise ValueError("qr.recovery_level must be 0-3 or a level name")
    separator = _parse_optional_str(input_cfg.get("separator"), field="input.separator")
    if separator == "":
        raise ValueError("input.separator cannot be empty")
    on_encode_error = _parse_optional_str(
        runtime_cfg.get("on_encode_error"), field="runtime.on_encode_error"
    )

    return AppConfig(
        label_width=_parse_float(
            label_cfg.get("width"), field="label.width", default=defaults.label_width
        ),
        label_height=_parse_float(
            label_cfg.get("height"), field="label.height", default=defaults.label_height
        ),
        rows=_parse_int(page_cfg.get("rows"), field="page.rows", default=defaults.rows),
        cols=_parse_int(page_cfg.get("cols"), field="page.cols", default=defaults.cols),
        unit=unit,
        page_size=page_size,
        page_width=page_width,
        page_height=page_height,
        placement=Placement.parse(placement_value) if placement_value else defaults.placement,
        font_size=_parse_float(
            label_cfg.get("font_size"), field="label.font_size", default=defaults.font_size
        ),
        font_family=_parse_optional_str(label_cfg.get("font_family"), field="label.font_family")
        or defaults.font_family,
        font_path=_parse_optional_str(label_cfg.get("font_path"), field="label.font_path") or None,
        min_qr_size_percentage=_parse_float(
            label_cfg.get("min_qr_size_percentage"),
            field="label.min_qr_size_percentage",
            default=defaults.min_qr_size_percentage,
        ),
        border=_parse_bool(label_cfg.get("border"), field="label.border", default=defaults.border),
        recovery_level=(
            RecoveryLevel.parse(cast(int | str, recovery_value))
            if recovery_value is not None
            else defaults.recovery_level
        ),
        qr_scale=_parse_int(qr_cfg.get("scale"), field="qr.scale", default=defaults.qr_scale),
        qr_boost_error=_parse_bool(
            qr_cfg.get("boost_error"), field="qr.boost_error", default=defaults.qr_boost_error
        ),
        separator=separator or defaults.separator,
        render_jobs=_parse_optional_render_jobs(
            runtime_cfg.get("render_jobs"), field="runtime.render_jobs"
        ),
        on_encode_error=cast(
            OnEncodeError,
            validate_on_encode_error(on_encode_error) if on_encode_error else "skip",
        ),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
        source=source,
    )


def build_sheet_config(config: AppConfig) -> SheetConfig:
    font_family = config.font_family
    if config.font_path and font_family == DEFAULT_FONT_FAMILY:
        # a TrueType file must not be registered under a core font name
        font_family = Path(config.font_path).stem
    layout = PageLayout(
        cell=Cell(config.label_width, config.label_height),
        rows=config.rows,
        cols=config.cols,
        unit=config.unit,
        page_size=config.page_size,
        page_width=config.page_width,
        page_height=config.page_height,
        placement=config.placement,
        font_size=config.font_size,
    )
    return SheetConfig(
        layout=layout,
        qr_config=build_qr_config(config),
        min_qr_size_percentage=config.min_qr_size_percentage,
        border=config.border,
        font_family=font_family,
        font_path=config.font_path,
        on_encode_error=config.on_encode_error,
        render_jobs=config.render_jobs,
    )


def build_qr_config(config: AppConfig) -> QrConfig:
    if config.qr_scale <= 0:
        raise ValueError("qr.scale must be a positive integer")
    return QrConfig.for_recovery_level(
        config.recovery_level,
        scale=config.qr_scale,
        boost_error=config.qr_boost_error,
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    raise ValueError(f"[{key}] must be a table")


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{field} must be a boolean")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"{field} must be a boolean")
    raise ValueError(f"{field} must be a boolean")


def _parse_optional_render_jobs(
    value: object,
    *,
    field: str,
) -> int | Literal["auto"] | None:
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return None
        if normalized == "auto":
            return "auto"
        parsed = _parse_int_strict(normalized, field=field)
        if parsed <= 0:
            raise ValueError(f"{field} must be 'auto' or a positive integer")
        return parsed
    parsed = _parse_int_strict(value, field=field)
    if parsed <= 0:
        raise ValueError(f"{field} must be 'auto' or a positive integer")
    return parsed


def _parse_int_strict(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError(f"{field} must be an integer")
        try:
            return int(text)
        except ValueError as exc:
            raise ValueError(f"{field} must be an integer") from exc
    raise ValueError(f"{field} must be an integer")


def _parse_int(value: object, *, field: str, default: int) -> int:
    if value is None:
        return default
    return _parse_int_strict(value, field=field)


def _parse_float(value: object, *, field: str, default: float) -> float:
    parsed = _parse_optional_float(value, field=field)
    return default if parsed is None else parsed


def _parse_optional_float(value: object, *, field: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError as exc:
            raise ValueError(f"{field} must be a number") from exc
    else:
        raise ValueError(f"{field} must be a number")
    if not math.isfinite(parsed):
        raise ValueError(f"{field} must be a finite number")
    return parsed


def _parse_optional_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    return value.strip()
