"""
오늘 날짜 셀(앵커) 확정

1) date_range 에서 오늘 날짜(00:00) 셀을 찾는다. 없으면 DateNotFound.
2) surname_range 가 있으면 날짜 행 '이하'에서 담당자 이름 셀을 찾아 행을 옮긴다.
   못 찾으면 날짜 행 그대로 (FALLBACK_TO_ANCHOR).
"""
import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional, Protocol, Union

import pytz

from x_follower_report.errors import DateNotFound, ValueNotFound
from x_follower_report.layout import SheetLayout
from x_follower_report.sheet_match import match


class SheetHandle(Protocol):
    def get_range(self, ref: str) -> List[List[Any]]:
        ...

    def set_cell_value(self, row: int, col: int, value: Any) -> None:
        ...


class ManagerRowStatus(enum.Enum):
    FOUND = "found"
    FALLBACK_TO_ANCHOR = "fallback_to_anchor"
    NOT_CONFIGURED = "not_configured"


@dataclass(frozen=True)
class ManagerRowResolution:
    status: ManagerRowStatus
    row: int

    @property
    def found(self) -> bool:
        return self.status is ManagerRowStatus.FOUND


@dataclass(frozen=True)
class Anchor:
    row: int
    col: int
    date_row: int
    manager: ManagerRowResolution


def today_midnight(tz_name: str = "Asia/Tokyo") -> datetime:
    now = datetime.now(pytz.timezone(tz_name))
    return datetime(now.year, now.month, now.day)


def date_search_key(today: Union[date, datetime], date_format: Optional[str]) -> Any:
    # 시트 값과 같은 방식으로 문자열화해야 매칭된다
    midnight = datetime(today.year, today.month, today.day)
    if date_format:
        return midnight.strftime(date_format)
    return midnight


def resolve_manager_row(
    sheet: SheetHandle, layout: SheetLayout, manager: str, date_row: int
) -> ManagerRowResolution:
    if layout.surname_range is None:
        return ManagerRowResolution(ManagerRowStatus.NOT_CONFIGURED, date_row)

    surname_range = layout.surname_range
    values = sheet.get_range(surname_range.a1)
    # 날짜 행보다 위쪽은 검색하지 않음
    start_row = max(date_row - surname_range.first_row, 0) + 1
    try:
        row, _ = match(values, manager, exact=True, start_row=start_row)
    except ValueNotFound:
        return ManagerRowResolution(ManagerRowStatus.FALLBACK_TO_ANCHOR, date_row)
    return ManagerRowResolution(ManagerRowStatus.FOUND, surname_range.first_row + row - 1)


def resolve_anchor(
    sheet: SheetHandle,
    layout: SheetLayout,
    manager: str,
    today: Optional[Union[date, datetime]] = None,
    tz_name: str = "Asia/Tokyo",
) -> Anchor:
    if today is None:
        today = today_midnight(tz_name)
    key = date_search_key(today, layout.date_format)

    values = sheet.get_range(layout.date_range.a1)
    try:
        row, col = match(values, key, exact=True)
    except ValueNotFound:
        raise DateNotFound(
            f"오늘 날짜({key})가 시트 '{layout.sheet_name}' {layout.date_range.a1} 에 없습니다."
        ) from None
    date_row, date_col = layout.date_range.to_sheet(row, col)

    resolution = resolve_manager_row(sheet, layout, manager, date_row)
    return Anchor(row=resolution.row, col=date_col, date_row=date_row, manager=resolution)
