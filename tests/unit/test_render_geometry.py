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


import unittest

from qrlabel.core.models import Cell
from qrlabel.render.geometry import Cursor, PageGeometry, advance_cursor
from tests.test_support import make_layout


def _walk(geometry: PageGeometry, count: int) -> list[Cursor]:
    cursors = []
    cursor = geometry.origin()
    for _ in range(count):
        cursors.append(cursor)
        cursor = advance_cursor(cursor, geometry).cursor
    return cursors


class TestPageGeometry(unittest.TestCase):
    def test_margins_center_the_grid(self) -> None:
        geometry = PageGeometry.for_page(210.0, 297.0, make_layout())
        self.assertAlmostEqual(geometry.margin_w, 10.0)
        self.assertAlmostEqual(geometry.margin_h, 42.5)
        self.assertEqual(geometry.columns_per_row(), 5)
        self.assertEqual(geometry.rows_per_page(), 10)

    def test_oversized_grid_gets_zero_margin(self) -> None:
        geometry = PageGeometry.for_page(210.0, 297.0, make_layout(rows=20, cols=8))
        self.assertEqual(geometry.margin_w, 0.0)
        self.assertEqual(geometry.margin_h, 0.0)
        self.assertEqual(geometry.columns_per_row(), 5)
        self.assertEqual(geometry.rows_per_page(), 14)

    def test_cell_larger_than_page_raises(self) -> None:
        with self.assertRaises(ValueError):
            PageGeometry.for_page(210.0, 297.0, make_layout(cell=Cell(300.0, 20.0)))


class TestAdvanceCursor(unittest.TestCase):
    def setUp(self) -> None:
        self.geometry = PageGeometry.for_page(210.0, 297.0, make_layout())

    def test_moves_right_within_row(self) -> None:
        step = advance_cursor(self.geometry.origin(), self.geometry)
        self.assertFalse(step.row_break)
        self.assertFalse(step.page_break)
        self.assertAlmostEqual(step.cursor.x, 48.0)
        self.assertAlmostEqual(step.cursor.y, 42.5)
        self.assertEqual(step.cursor.col, 1)

    def test_row_break_after_last_column(self) -> None:
        cursor = Cursor(x=162.0, y=42.5, row=0, col=4)
        step = advance_cursor(cursor, self.geometry)
        self.assertTrue(step.row_break)
        self.assertFalse(step.page_break)
        self.assertAlmostEqual(step.cursor.x, 10.0)
        self.assertAlmostEqual(step.cursor.y, 63.7)
        self.assertEqual((step.cursor.row, step.cursor.col), (1, 0))

    def test_page_break_after_last_row(self) -> None:
        cursor = Cursor(x=162.0, y=233.3, row=9, col=4)
        step = advance_cursor(cursor, self.geometry)
        self.assertTrue(step.row_break)
        self.assertTrue(step.page_break)
        self.assertEqual(step.cursor, self.geometry.origin(2))

    def test_fifty_one_labels_span_two_pages(self) -> None:
        cursors = _walk(self.geometry, 51)
        last_on_first_page = cursors[49]
        self.assertEqual(
            (last_on_first_page.page, last_on_first_page.row, last_on_first_page.col), (1, 9, 4)
        )
        overflow = cursors[50]
        self.assertEqual((overflow.page, overflow.row, overflow.col), (2, 0, 0))
        self.assertAlmostEqual(overflow.x, 10.0)
        self.assertAlmostEqual(overflow.y, 42.5)

    def test_cells_never_cross_the_content_area(self) -> None:
        for cursor in _walk(self.geometry, 120):
            with self.subTest(cursor=cursor):
                self.assertGreaterEqual(cursor.x, self.geometry.margin_w - 0.01)
                self.assertLessEqual(cursor.x + 38.0, self.geometry.content_right + 0.01)
                self.assertLessEqual(cursor.y + 21.2, self.geometry.content_bottom + 0.01)

    def test_rows_and_columns_fill_in_order(self) -> None:
        cursors = _walk(self.geometry, 12)
        positions = [(cursor.row, cursor.col) for cursor in cursors]
        expected = [(row, col) for row in range(3) for col in range(5)][:12]
        self.assertEqual(positions, expected)


if __name__ == "__main__":
    unittest.main()
