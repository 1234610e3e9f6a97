from datetime import date
from typing import Any, List

import pytest

from x_follower_report.layout import RangeRef

TODAY = date(2026, 10, 19)


class GridSheet:
    """메모리 위의 시트. rows[0] 이 1행."""

    def __init__(self, rows: List[List[Any]], title: str = "sheet"):
        self.title = title
        self.rows = [list(r) for r in rows]
        self.writes = []
        self.reads = []

    def get_range(self, ref: str) -> List[List[Any]]:
        self.reads.append(ref)
        rr = RangeRef.parse(ref)
        last_row = rr.last_row or len(self.rows)
        out = []
        for r in range(rr.first_row, last_row + 1):
            row = self.rows[r - 1] if r - 1 < len(self.rows) else []
            last_col = rr.last_col or len(row)
            out.append([row[c - 1] if c - 1 < len(row) else "" for c in range(rr.first_col, last_col + 1)])
        return out

    def set_cell_value(self, row: int, col: int, value: Any) -> None:
        self.writes.append((row, col, value))
        while len(self.rows) < row:
            self.rows.append([])
        target = self.rows[row - 1]
        while len(target) < col:
            target.append("")
        target[col - 1] = value


def build_rows(cells, n_rows=20):
    """{(row, col): value} → 2차원 리스트"""
    rows = [[] for _ in range(n_rows)]
    for (r, c), v in cells.items():
        row = rows[r - 1]
        while len(row) < c:
            row.append("")
        row[c - 1] = v
    return rows


@pytest.fixture
def opener():
    def make(sheet):
        opened = []

        def open_sheet(sheet_id, sheet_name):
            opened.append((sheet_id, sheet_name))
            return sheet

        open_sheet.opened = opened
        return open_sheet

    return make
