from datetime import date, datetime

import pytest

from conftest import TODAY, GridSheet, build_rows
from x_follower_report.anchor import (
    ManagerRowStatus,
    date_search_key,
    resolve_anchor,
    today_midnight,
)
from x_follower_report.errors import DateNotFound
from x_follower_report.layout import SheetLayout


def _column_layout(**extra):
    config = {
        "sheet_id": "sid",
        "sheet_name": "report",
        "date_range": "A:A",
        "cell": {"followers": ["D"]},
        "cell_offsets": {"row": [0, 1]},
        "date_format": "%Y/%m/%d",
    }
    config.update(extra)
    return SheetLayout.from_config(config)


def _team_layout():
    return SheetLayout.from_config({
        "sheet_id": "sid",
        "sheet_name": "ff",
        "date_range": "5:5",
        "surname_range": "A:A",
        "cell": {"followers": "", "following": ""},
        "cell_offsets": {"row": [0, 1], "col": [0, 1]},
        "date_format": "%Y/%m/%d",
    })


def _team_sheet():
    return GridSheet(build_rows({
        (3, 1): "御手洗",
        (5, 2): "2026/10/18",
        (5, 3): "2026/10/19",
        (5, 4): "2026/10/20",
        (6, 1): "岸",
        (11, 1): "御手洗",
        (14, 1): "岸",
    }))


def test_date_search_key_formats_midnight():
    assert date_search_key(date(2026, 1, 2), "%Y/%m/%d") == "2026/01/02"
    assert date_search_key(datetime(2026, 1, 2, 15, 30), None) == datetime(2026, 1, 2)


def test_today_midnight_has_no_time_component():
    now = today_midnight("Asia/Tokyo")
    assert (now.hour, now.minute, now.second, now.microsecond) == (0, 0, 0, 0)
    assert now.tzinfo is None


def test_date_anchor_without_surname_range():
    sheet = GridSheet(build_rows({(9, 1): "2026/10/18", (10, 1): "2026/10/19"}))
    anchor = resolve_anchor(sheet, _column_layout(), "岸", today=TODAY)
    assert (anchor.row, anchor.col) == (10, 1)
    assert anchor.date_row == 10
    assert anchor.manager.status is ManagerRowStatus.NOT_CONFIGURED
    assert sheet.reads == ["A:A"]


def test_date_anchor_offset_by_range_start():
    sheet = GridSheet(build_rows({(12, 3): "2026/10/19"}))
    layout = _column_layout(date_range="C10:C20")
    anchor = resolve_anchor(sheet, layout, "岸", today=TODAY)
    assert (anchor.row, anchor.col) == (12, 3)


def test_date_matches_datetime_cells_without_format():
    sheet = GridSheet([[datetime(2026, 10, 18)], [datetime(2026, 10, 19)]])
    layout = _column_layout(date_format=None)
    anchor = resolve_anchor(sheet, layout, "岸", today=TODAY)
    assert anchor.row == 2


def test_missing_date_raises():
    sheet = GridSheet(build_rows({(10, 1): "2026/10/18"}))
    with pytest.raises(DateNotFound):
        resolve_anchor(sheet, _column_layout(), "岸", today=TODAY)


def test_manager_row_found_below_date_row():
    anchor = resolve_anchor(_team_sheet(), _team_layout(), "御手洗", today=TODAY)
    # 3행의 御手洗 는 날짜 행(5)보다 위라서 무시
    assert anchor.row == 11
    assert anchor.col == 3
    assert anchor.date_row == 5
    assert anchor.manager.status is ManagerRowStatus.FOUND
    assert anchor.manager.found


def test_manager_first_match_wins():
    anchor = resolve_anchor(_team_sheet(), _team_layout(), "岸", today=TODAY)
    assert anchor.row == 6


def test_manager_not_found_falls_back_to_date_row():
    anchor = resolve_anchor(_team_sheet(), _team_layout(), "田中", today=TODAY)
    assert anchor.row == 5
    assert anchor.manager.status is ManagerRowStatus.FALLBACK_TO_ANCHOR
    assert not anchor.manager.found


def test_manager_on_date_row_itself():
    sheet = GridSheet(build_rows({(5, 1): "岸", (5, 3): "2026/10/19"}))
    anchor = resolve_anchor(sheet, _team_layout(), "岸", today=TODAY)
    assert anchor.row == 5
    assert anchor.manager.found
