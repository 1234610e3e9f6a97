"""
시트 기록 (배치 라이터)

레이아웃 + 담당자 + 계정별 지표를 받아서
앵커 확정 → 기록 셀 계산 → 기록(또는 dry run 기록만) 하고 WriteReport 를 돌려준다.
로그는 호출하는 쪽에서 남긴다.
"""
import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional, Union

import pandas as pd

from x_follower_report.anchor import Anchor, SheetHandle, resolve_anchor
from x_follower_report.errors import ManagerNotFound
from x_follower_report.layout import SheetLayout
from x_follower_report.offsets import AccountMetrics, expand_targets

SheetOpener = Callable[[str, str], SheetHandle]

REPORT_COLUMNS = ["account", "metric", "address", "value", "applied", "error"]


@dataclass(frozen=True)
class WriteEntry:
    account: str
    metric: str
    address: str
    row: int
    col: int
    value: Any
    applied: bool
    error: Optional[str] = None


@dataclass
class WriteReport:
    manager: str
    sheet_name: str
    dry_run: bool
    anchor: Anchor
    entries: List[WriteEntry] = field(default_factory=list)

    @property
    def applied(self) -> List[WriteEntry]:
        return [e for e in self.entries if e.applied]

    @property
    def failed(self) -> List[WriteEntry]:
        return [e for e in self.entries if e.error is not None]

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {
                "account": e.account,
                "metric": e.metric,
                "address": e.address,
                "value": e.value,
                "applied": e.applied,
                "error": e.error or "",
            }
            for e in self.entries
        ]
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def write_to_sheet(
    open_sheet: SheetOpener,
    layout: SheetLayout,
    manager: str,
    accounts: Union[AccountMetrics, Mapping[str, Mapping[str, Any]]],
    dry_run: bool = False,
    today: Optional[Union[date, datetime]] = None,
    strict_manager: bool = False,
    tz_name: str = "Asia/Tokyo",
) -> WriteReport:
    layout = layout.for_manager(manager)
    sheet = open_sheet(layout.sheet_id, layout.sheet_name)

    # 앵커를 못 찾으면 여기서 예외 → 한 셀도 쓰지 않음
    anchor = resolve_anchor(sheet, layout, manager, today=today, tz_name=tz_name)
    if strict_manager and layout.surname_range is not None and not anchor.manager.found:
        raise ManagerNotFound(
            f"담당자 '{manager}' 를 {layout.surname_range.a1} (날짜 행 {anchor.date_row} 이하)에서 찾지 못했습니다."
        )

    targets = expand_targets(layout, anchor, accounts)
    report = WriteReport(
        manager=manager,
        sheet_name=layout.sheet_name,
        dry_run=dry_run,
        anchor=anchor,
    )

    for target in targets:
        applied = False
        error = None
        if not dry_run:
            try:
                sheet.set_cell_value(target.row, target.col, target.value)
                applied = True
            except Exception as exc:
                error = f"{type(exc).__name__}: {exc}"
        report.entries.append(
            WriteEntry(
                account=target.account,
                metric=target.metric,
                address=target.address,
                row=target.row,
                col=target.col,
                value=target.value,
                applied=applied,
                error=error,
            )
        )

    flush = getattr(sheet, "flush", None)
    if not dry_run and callable(flush):
        try:
            flush()
        except Exception as exc:
            # 일괄 전송 실패 → 시트에 반영된 셀이 없으므로 전부 실패 처리
            error = f"{type(exc).__name__}: {exc}"
            report.entries = [
                dataclasses.replace(e, applied=False, error=e.error or error)
                for e in report.entries
            ]
    return report
