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
import shutil
import sys
from pathlib import Path

from platformdirs import user_config_dir

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config/default.toml"
USER_CONFIG_FILENAME = "config.toml"
CONFIG_PATH_ENV = "QRLABEL_CONFIG"
XDG_CONFIG_ENV = "XDG_CONFIG_HOME"


def user_config_path() -> Path:
    xdg_override = os.environ.get(XDG_CONFIG_ENV)
    if xdg_override:
        return Path(xdg_override) / "qrlabel" / USER_CONFIG_FILENAME
    if sys.platform == "darwin":
        return Path.home() / ".config" / "qrlabel" / USER_CONFIG_FILENAME
    return Path(user_config_dir("qrlabel", appauthor=False)) / USER_CONFIG_FILENAME


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path:
        config_path = Path(path).expanduser()
        if not config_path.is_file():
            raise ValueError(f"config file not found: {config_path}")
        return config_path

    env_path = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if env_path:
        config_path = Path(env_path).expanduser()
        if not config_path.is_file():
            raise ValueError(f"{CONFIG_PATH_ENV} points to a missing file: {config_path}")
        return config_path

    user_path = user_config_path()
    if user_path.is_file():
        return user_path
    return DEFAULT_CONFIG_PATH


def init_user_config() -> Path:
    dest = user_config_path()
    try:
        _copy_if_missing(DEFAULT_CONFIG_PATH, dest)
    except OSError as exc:
        raise OSError(f"unable to create config at {dest}: {exc}") from exc
    return dest


def _copy_if_missing(source: Path, dest: Path) -> None:
    if dest.exists():
        return
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)
