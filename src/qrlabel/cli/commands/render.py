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

from dataclasses import replace
from pathlib import Path

import typer

from ...config import AppConfig, build_sheet_config, load_app_config
from ...core.models import Placement, RecoveryLevel, normalize_page_size, normalize_unit
from ...core.validation import validate_on_encode_error
from ...render.pdf_render import render_label_sheet
from ...render.types import SheetResult
from ..core.common import _ctx_value, _run_cli
from ..core.completers import (
    complete_on_error,
    complete_page_size,
    complete_position,
    complete_recovery_level,
    complete_unit,
)
from ..core.log import _warn
from ..io.inputs import parse_labels, read_label_text
from ..ui import build_kv_table, configure_ui, console, progress

_RENDER_HELP = (
    "Render a sheet of QR code labels to PDF.\n\n"
    "Each input line is `content;caption`. Lines without a separator use the\n"
    "content as caption.\n\n"
    "Examples:\n"
    "  qrlabel render labels.pdf -i labels.txt\n"
    "  printf 'https://example.com;Example\\n' | qrlabel render labels\n"
    "  qrlabel render sheet.pdf -i items.csv -S , -r 8 -c 3 -w 63.5 -H 33.9\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_RENDER_HELP)(render)


def render(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Output PDF path (.pdf is appended if missing)."),
    input_file: str | None = typer.Option(
        None,
        "--input",
        "-i",
        help="File with one label per line (reads stdin when omitted).",
        rich_help_panel="Inputs",
    ),
    separator: str | None = typer.Option(
        None,
        "--separator",
        "-S",
        help="Separator between QR content and caption [default: ;].",
        rich_help_panel="Inputs",
    ),
    width: float | None = typer.Option(
        None,
        "--width",
        "-w",
        help="Label width in the page unit [default: 38].",
        rich_help_panel="Label",
    ),
    height: float | None = typer.Option(
        None,
        "--height",
        "-H",
        help="Label height in the page unit [default: 21.2].",
        rich_help_panel="Label",
    ),
    position: str | None = typer.Option(
        None,
        "--position",
        "-p",
        help="Caption position relative to the QR code: T, B, L or R [default: R].",
        autocompletion=complete_position,
        rich_help_panel="Label",
    ),
    min_qr_size: float | None = typer.Option(
        None,
        "--min-qr-size",
        help="Smallest QR code, as a percentage of the label [default: 40].",
        rich_help_panel="Label",
    ),
    font_size: float | None = typer.Option(
        None,
        "--font-size",
        help="Caption font size in points [default: 10].",
        rich_help_panel="Label",
    ),
    font: Path | None = typer.Option(
        None,
        "--font",
        help="TrueType font file for captions (needed beyond Western European text).",
        rich_help_panel="Label",
    ),
    border: bool | None = typer.Option(
        None,
        "--border/--no-border",
        help="Draw the outline of every label.",
        show_default=False,
        rich_help_panel="Label",
    ),
    rows: int | None = typer.Option(
        None,
        "--rows",
        "-r",
        help="Rows per page [default: 10].",
        rich_help_panel="Page",
    ),
    cols: int | None = typer.Option(
        None,
        "--cols",
        "-c",
        help="Columns per page [default: 5].",
        rich_help_panel="Page",
    ),
    unit: str | None = typer.Option(
        None,
        "--unit",
        "-u",
        help="Unit of measurement: pt, mm, cm or inch [default: mm].",
        autocompletion=complete_unit,
        rich_help_panel="Page",
    ),
    page_size: str | None = typer.Option(
        None,
        "--page-size",
        "-s",
        help="Page size: A3, A4, A5, Letter or Legal [default: A4].",
        autocompletion=complete_page_size,
        rich_help_panel="Page",
    ),
    page_width: float | None = typer.Option(
        None,
        "--page-width",
        help="Custom page width (requires --page-height).",
        rich_help_panel="Page",
    ),
    page_height: float | None = typer.Option(
        None,
        "--page-height",
        help="Custom page height (requires --page-width).",
        rich_help_panel="Page",
    ),
    recovery_level: str | None = typer.Option(
        None,
        "--recovery-level",
        "-R",
        help="QR error correction: 0 (low) to 3 (highest) [default: 1].",
        autocompletion=complete_recovery_level,
        rich_help_panel="QR",
    ),
    on_error: str | None = typer.Option(
        None,
        "--on-error",
        help="What to do with content that cannot be encoded: skip or abort [default: skip].",
        autocompletion=complete_on_error,
        rich_help_panel="QR",
    ),
) -> None:
    quiet_flag = bool(_ctx_value(ctx, "quiet"))
    debug_value = bool(_ctx_value(ctx, "debug"))
    config_path = _ctx_value(ctx, "config")

    if (page_width is None) != (page_height is None):
        raise typer.BadParameter("--page-width and --page-height must be given together")
    if page_width is not None and page_size is not None:
        raise typer.BadParameter("use either --page-size or --page-width/--page-height")

    def _run() -> None:
        app_config = load_app_config(config_path)
        quiet = quiet_flag or app_config.ui.quiet
        if app_config.ui.no_color:
            configure_ui(no_color=True)

        overrides: dict[str, object] = {
            "label_width": width,
            "label_height": height,
            "rows": rows,
            "cols": cols,
            "unit": normalize_unit(unit) if unit is not None else None,
            "placement": Placement.parse(position) if position is not None else None,
            "font_size": font_size,
            "font_path": str(font) if font is not None else None,
            "min_qr_size_percentage": min_qr_size,
            "border": border,
            "recovery_level": (
                RecoveryLevel.parse(recovery_level) if recovery_level is not None else None
            ),
            "separator": separator,
            "on_encode_error": validate_on_encode_error(on_error) if on_error else None,
        }
        if page_width is not None:
            overrides.update(page_size=None, page_width=page_width, page_height=page_height)
        elif page_size is not None:
            overrides.update(
                page_size=normalize_page_size(page_size), page_width=None, page_height=None
            )
        app_config = _apply_overrides(app_config, overrides)

        labels = parse_labels(read_label_text(input_file), app_config.separator)
        if not labels:
            raise ValueError("no labels found in the input")
        sheet_config = build_sheet_config(app_config)

        with progress(quiet=quiet) as progress_bar:
            task_id = None
            if progress_bar is not None:
                task_id = progress_bar.add_task("Rendering labels...", total=len(labels))

            def _on_progress(done: int, total: int) -> None:
                if progress_bar is not None and task_id is not None:
                    progress_bar.update(task_id, completed=done, total=total)

            result = render_label_sheet(
                labels,
                sheet_config,
                output,
                on_diagnostic=lambda message: _warn(message, quiet=quiet),
                on_progress=_on_progress,
            )

        console.print(result.output_path, soft_wrap=True, markup=False, highlight=False)
        if not quiet:
            console.print(_summary_table(result))

    _run_cli(_run, debug=debug_value)


def _apply_overrides(config: AppConfig, overrides: dict[str, object]) -> AppConfig:
    values = {key: value for key, value in overrides.items() if value is not None}
    for key in ("page_size", "page_width", "page_height"):
        if key in overrides and overrides[key] is None:
            values[key] = None
    return replace(config, **values)  # type: ignore[arg-type]


def _summary_table(result: SheetResult):
    rows = [
        ("Pages", str(result.pages)),
        ("Labels placed", str(len(result.placed))),
        ("Labels per page", str(result.labels_per_page)),
    ]
    if result.skipped:
        rows.append(("Labels skipped", str(len(result.skipped))))
    if result.degraded:
        rows.append(("Captions overflowing", str(len(result.degraded))))
    return build_kv_table(rows)
