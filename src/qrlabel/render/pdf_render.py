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

import functools
import io
import os
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, cast

from fpdf import FPDF

from ..core.models import Cell, Label, LayoutResult, normalize_unit
from ..core.validation import (
    validate_on_encode_error,
    validate_page_layout,
    validate_percentage,
)
from ..qr.codec import QrEncodeError, qr_bytes, qr_kwargs
from .geometry import Cursor, PageGeometry, advance_cursor
from .layout import layout_cell
from .qr_stream import QrImageStream, resolve_qr_workers
from .text import CORE_FONTS_ENCODING, FpdfMeasurement, setup_font
from .types import PlacedLabel, SheetConfig, SheetResult, SkippedLabel

DiagnosticCallback = Callable[[str], None]
ProgressCallback = Callable[[int, int], None]

_OUTPUT_MODE = 0o644


def pdf_output_path(path: str | Path) -> Path:
    output = Path(path)
    if output.suffix.lower() != ".pdf":
        output = output.with_name(f"{output.name}.pdf")
    return output


def render_label_sheet(
    labels: Sequence[Label],
    config: SheetConfig,
    output_path: str | Path,
    *,
    on_diagnostic: DiagnosticCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> SheetResult:
    """Lay out every label on a grid of cells and write the sheet as a PDF.

    Labels whose content cannot be encoded are skipped with a diagnostic, or
    abort the whole run when ``config.on_encode_error`` is ``"abort"``. The file
    at ``output_path`` is only created once the whole document rendered.
    """
    if not labels:
        raise ValueError("no labels to render")
    layout = config.layout
    validate_page_layout(layout)
    validate_percentage(config.min_qr_size_percentage, label="minimum QR size percentage")
    on_encode_error = validate_on_encode_error(config.on_encode_error)
    notify = on_diagnostic or (lambda _message: None)
    output = pdf_output_path(output_path)
    if not config.font_path:
        _require_core_font_captions(labels)

    pdf = FPDF(
        orientation="P",
        unit=normalize_unit(layout.unit),
        format=cast(Any, layout.page_format()),
    )
    pdf.set_auto_page_break(False)
    family = setup_font(
        pdf, family=config.font_family, font_path=config.font_path, size=layout.font_size
    )
    measure = FpdfMeasurement(pdf)
    geometry = PageGeometry.for_page(pdf.w, pdf.h, layout)
    cursor = geometry.origin()

    placed: list[PlacedLabel] = []
    skipped: list[SkippedLabel] = []
    encode = functools.partial(qr_bytes, **qr_kwargs(config.qr_config))
    encode_level = config.qr_config.error
    workers = resolve_qr_workers(len(labels), config.render_jobs)

    with QrImageStream([label.content for label in labels], encode, workers=workers) as stream:
        for image in stream:
            label = labels[image.index]
            if on_progress is not None:
                on_progress(image.index + 1, len(labels))
            if image.data is None:
                error = image.error or QrEncodeError(label.content, encode_level, "no image")
                if on_encode_error == "abort":
                    raise error
                reason = str(error)
                notify(f"skipping label {image.index + 1}: {reason}")
                skipped.append(SkippedLabel(index=image.index, label=label, reason=reason))
                continue

            if pdf.page < cursor.page:
                pdf.add_page()
            result = layout_cell(layout, label, config.min_qr_size_percentage, cursor, measure)
            _draw_cell(
                pdf, cursor, layout.cell, result, image.data, family=family, border=config.border
            )
            message = _layout_diagnostic(image.index, result)
            if message:
                notify(message)
            placed.append(PlacedLabel(index=image.index, label=label, cursor=cursor, layout=result))
            cursor = advance_cursor(cursor, geometry).cursor

    if not placed:
        raise ValueError("none of the labels could be rendered")

    _write_atomic(output, bytes(pdf.output()))
    return SheetResult(
        output_path=str(output),
        pages=pdf.page,
        labels_per_page=geometry.columns_per_row() * geometry.rows_per_page(),
        placed=tuple(placed),
        skipped=tuple(skipped),
    )


def _require_core_font_captions(labels: Sequence[Label]) -> None:
    for index, label in enumerate(labels):
        try:
            label.caption.encode(CORE_FONTS_ENCODING)
        except UnicodeEncodeError:
            raise ValueError(
                f"caption of label {index + 1} has characters the built-in fonts cannot draw; "
                "use a TrueType font file (--font)"
            ) from None


def _draw_cell(
    pdf: FPDF,
    cursor: Cursor,
    cell: Cell,
    result: LayoutResult,
    png: bytes,
    *,
    family: str,
    border: bool,
) -> None:
    if border:
        pdf.rect(cursor.x, cursor.y, cell.width, cell.height)

    qr = result.qr_rect
    if qr.width > 0:
        pdf.image(io.BytesIO(png), x=qr.x, y=qr.y, w=qr.width, h=qr.height)

    if not result.caption_lines:
        return
    caption = result.caption_rect
    pdf.set_font(family, size=result.font_size)
    y = caption.y
    for line in result.caption_lines:
        pdf.set_xy(caption.x, y)
        pdf.cell(caption.width, result.line_height, line, align="C")
        y += result.line_height


def _layout_diagnostic(index: int, result: LayoutResult) -> str | None:
    if result.overflow:
        return (
            f"label {index + 1}: caption does not fit even at font size "
            f"{result.font_size:g}; it will extend past the cell"
        )
    if result.font_reduced:
        return (
            f"label {index + 1}: decreased font size from {result.base_font_size:g} "
            f"to {result.font_size:g} to fit the caption"
        )
    return None


def _write_atomic(path: Path, data: bytes) -> None:
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(temp_name, _OUTPUT_MODE)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
