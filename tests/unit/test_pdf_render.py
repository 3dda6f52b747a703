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


import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from qrlabel.core.models import Cell, Label
from qrlabel.qr.codec import QrEncodeError
from qrlabel.render.pdf_render import pdf_output_path, render_label_sheet
from qrlabel.render.types import SheetConfig
from tests.test_support import make_labels, make_layout

TOO_LONG = "x" * 8000


class TestPdfOutputPath(unittest.TestCase):
    def test_suffix_added_when_missing(self) -> None:
        cases = {
            "labels": "labels.pdf",
            "labels.pdf": "labels.pdf",
            "labels.PDF": "labels.PDF",
            "labels.txt": "labels.txt.pdf",
        }
        for given, expected in cases.items():
            with self.subTest(given=given):
                self.assertEqual(pdf_output_path(given).name, expected)


class TestRenderLabelSheet(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.tmpdir = Path(self._tmpdir.name)
        self.config = SheetConfig(layout=make_layout(), render_jobs=1)

    def test_full_page_renders_single_page(self) -> None:
        result = render_label_sheet(make_labels(50), self.config, self.tmpdir / "sheet.pdf")
        self.assertEqual(result.pages, 1)
        self.assertEqual(result.labels_per_page, 50)
        self.assertEqual(len(result.placed), 50)

    def test_overflow_label_starts_second_page(self) -> None:
        result = render_label_sheet(make_labels(51), self.config, self.tmpdir / "sheet.pdf")
        self.assertEqual(result.pages, 2)
        last = result.placed[-1].cursor
        self.assertEqual((last.page, last.row, last.col), (2, 0, 0))
        data = Path(result.output_path).read_bytes()
        self.assertTrue(data.startswith(b"%PDF"))

    def test_output_gets_pdf_suffix(self) -> None:
        result = render_label_sheet(make_labels(3), self.config, self.tmpdir / "sheet")
        self.assertTrue(result.output_path.endswith("sheet.pdf"))
        self.assertTrue((self.tmpdir / "sheet.pdf").is_file())

    def test_output_permissions(self) -> None:
        result = render_label_sheet(make_labels(1), self.config, self.tmpdir / "sheet.pdf")
        if os.name == "posix":
            self.assertEqual(os.stat(result.output_path).st_mode & 0o777, 0o644)

    def test_parallel_encoding_matches_input_order(self) -> None:
        config = SheetConfig(layout=make_layout(), render_jobs=4)
        labels = make_labels(20)
        result = render_label_sheet(labels, config, self.tmpdir / "sheet.pdf")
        self.assertEqual([item.label for item in result.placed], labels)
        self.assertEqual([item.index for item in result.placed], list(range(20)))

    def test_unencodable_label_is_skipped(self) -> None:
        labels = [
            Label("first", "First"),
            Label(TOO_LONG, "Too long"),
            Label("third", "Third"),
        ]
        messages: list[str] = []
        result = render_label_sheet(
            labels, self.config, self.tmpdir / "sheet.pdf", on_diagnostic=messages.append
        )
        self.assertEqual([item.index for item in result.skipped], [1])
        self.assertEqual([item.index for item in result.placed], [0, 2])
        # the skipped label does not consume a cell
        self.assertEqual(result.placed[1].cursor.col, 1)
        self.assertTrue(any("skipping label 2" in message for message in messages))

    def test_abort_policy_raises_and_writes_nothing(self) -> None:
        config = SheetConfig(layout=make_layout(), on_encode_error="abort", render_jobs=1)
        labels = [Label("first", "First"), Label(TOO_LONG, "Too long")]
        output = self.tmpdir / "sheet.pdf"
        with self.assertRaises(QrEncodeError):
            render_label_sheet(labels, config, output)
        self.assertFalse(output.exists())
        self.assertEqual(list(self.tmpdir.iterdir()), [])

    def test_all_labels_unencodable_raises(self) -> None:
        output = self.tmpdir / "sheet.pdf"
        with self.assertRaises(ValueError):
            render_label_sheet([Label(TOO_LONG, "Too long")], self.config, output)
        self.assertFalse(output.exists())

    def test_font_reduction_is_reported(self) -> None:
        caption = "A very long caption that needs several lines to fit next to the QR code"
        messages: list[str] = []
        result = render_label_sheet(
            [Label("payload", caption)],
            self.config,
            self.tmpdir / "sheet.pdf",
            on_diagnostic=messages.append,
        )
        self.assertTrue(result.placed[0].layout.font_size < 10.0 or result.degraded)
        self.assertTrue(any("font size" in message for message in messages))

    def test_progress_callback_counts_every_label(self) -> None:
        seen: list[tuple[int, int]] = []
        render_label_sheet(
            make_labels(4),
            self.config,
            self.tmpdir / "sheet.pdf",
            on_progress=lambda done, total: seen.append((done, total)),
        )
        self.assertEqual(seen, [(1, 4), (2, 4), (3, 4), (4, 4)])

    def test_custom_page_dimensions_and_border(self) -> None:
        layout = make_layout(
            cell=Cell(50.0, 25.0),
            rows=2,
            cols=2,
            page_size=None,
            page_width=100.0,
            page_height=50.0,
        )
        config = SheetConfig(layout=layout, border=True, render_jobs=1)
        result = render_label_sheet(make_labels(5), config, self.tmpdir / "sheet.pdf")
        self.assertEqual(result.pages, 2)
        self.assertEqual(result.labels_per_page, 4)

    def test_invalid_configuration_raises_before_writing(self) -> None:
        cases = (
            SheetConfig(layout=make_layout(cell=Cell(0.0, 21.2))),
            SheetConfig(layout=make_layout(rows=0)),
            SheetConfig(layout=make_layout(cell=Cell(300.0, 21.2))),
            SheetConfig(layout=make_layout(), min_qr_size_percentage=150.0),
            SheetConfig(layout=make_layout(page_size=None, page_width=100.0)),
            SheetConfig(layout=make_layout(), on_encode_error="ignore"),  # type: ignore[arg-type]
        )
        output = self.tmpdir / "sheet.pdf"
        for config in cases:
            with self.subTest(config=config):
                with self.assertRaises(ValueError):
                    render_label_sheet(make_labels(1), config, output)
                self.assertFalse(output.exists())

    def test_windows_1252_caption_uses_builtin_font(self) -> None:
        output = self.tmpdir / "sheet.pdf"
        labels = [Label("price", "\u20ac 5 \u2013 \u201cSale\u201d")]
        result = render_label_sheet(labels, self.config, output)
        self.assertTrue(output.is_file())
        self.assertEqual(len(result.placed), 1)
        self.assertEqual(result.skipped, ())

    def test_caption_beyond_builtin_font_requires_truetype_font(self) -> None:
        output = self.tmpdir / "sheet.pdf"
        with self.assertRaises(ValueError) as ctx:
            render_label_sheet([Label("tokyo", "東京")], self.config, output)
        self.assertIn("--font", str(ctx.exception))
        self.assertFalse(output.exists())

    def test_empty_label_list_raises(self) -> None:
        with self.assertRaises(ValueError):
            render_label_sheet([], self.config, self.tmpdir / "sheet.pdf")

    def test_failed_write_leaves_no_partial_file(self) -> None:
        output = self.tmpdir / "sheet.pdf"
        with mock.patch("qrlabel.render.pdf_render.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                render_label_sheet(make_labels(2), self.config, output)
        self.assertEqual(list(self.tmpdir.iterdir()), [])


if __name__ == "__main__":
    unittest.main()
