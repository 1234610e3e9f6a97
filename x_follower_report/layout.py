"""
시트 레이아웃 정의

- 날짜가 있는 범위, 담당자(성) 범위
- 지표별 기록 열 규칙: 날짜 셀 기준 오프셋(ByOffset) 또는 고정 열 문자(ByLabel)
- 행 오프셋: 기준 행에서 +n 행에 n번째 계정을 기록
"""
import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from x_follower_report.columns import column_letter, letter_to_index
from x_follower_report.errors import LayoutError

A1_RANGE_RE = re.compile(
    r"^(?:(?P<sheet>'[^']*(?:''[^']*)*'|[^!']+)!)?"
    r"(?P<c1>[A-Za-z]*)(?P<r1>\d*)"
    r"(?::(?P<c2>[A-Za-z]*)(?P<r2>\d*))?$"
)


@dataclass(frozen=True)
class RangeRef:
    """직사각형 범위. last_* 가 None 이면 시트 끝까지 열린 범위."""
    first_row: int
    first_col: int
    last_row: Optional[int] = None
    last_col: Optional[int] = None

    @classmethod
    def parse(cls, ref: str) -> "RangeRef":
        text = (ref or "").strip()
        m = A1_RANGE_RE.match(text)
        if not text or not m or not (m.group("c1") or m.group("r1")):
            raise LayoutError(f"범위 표기를 해석할 수 없습니다: {ref!r}")
        c1, r1 = m.group("c1"), m.group("r1")
        c2, r2 = m.group("c2"), m.group("r2")
        if c2 is None and r2 is None:
            # 단일 셀 (C3)
            if not (c1 and r1):
                raise LayoutError(f"범위 표기를 해석할 수 없습니다: {ref!r}")
            c2, r2 = c1, r1
        first_row = int(r1) if r1 else 1
        first_col = letter_to_index(c1) if c1 else 1
        last_row = int(r2) if r2 else None
        last_col = letter_to_index(c2) if c2 else None
        if r1 and not r2 and c2:
            # "A5:B" 처럼 끝 행이 비어 있으면 끝까지
            last_row = None
        if not c1 and not c2:
            # "5:5" 행 범위
            last_col = None
        if (last_row is not None and last_row < first_row) or (
            last_col is not None and last_col < first_col
        ):
            raise LayoutError(f"범위의 시작과 끝이 뒤집혀 있습니다: {ref!r}")
        return cls(first_row, first_col, last_row, last_col)

    @property
    def a1(self) -> str:
        # 열 전체 (A:A) / 행 전체 (5:5) / 일반 범위 (B18:B27)
        if self.first_row == 1 and self.last_row is None and self.last_col is not None:
            return f"{column_letter(self.first_col)}:{column_letter(self.last_col)}"
        if self.first_col == 1 and self.last_col is None:
            end_row = self.last_row if self.last_row is not None else ""
            return f"{self.first_row}:{end_row}"
        start = f"{column_letter(self.first_col)}{self.first_row}"
        end_col = column_letter(self.last_col) if self.last_col is not None else ""
        end_row = self.last_row if self.last_row is not None else ""
        if start == f"{end_col}{end_row}":
            return start
        return f"{start}:{end_col}{end_row}"

    # 블록 안의 1-based 위치 → 시트 좌표
    def to_sheet(self, row: int, col: int) -> Tuple[int, int]:
        return self.first_row + row - 1, self.first_col + col - 1


@dataclass(frozen=True)
class ByOffset:
    offset: int


@dataclass(frozen=True)
class ByLabel:
    label: str


ColumnRule = Union[ByOffset, ByLabel]


def resolve_column(rule: ColumnRule, col_start: int) -> int:
    if isinstance(rule, ByOffset):
        return col_start + rule.offset
    # 열 문자 지정이면 날짜 셀 열은 무시
    return letter_to_index(rule.label)


def _column_label(value: Any) -> str:
    # ["D"], "D", "" 모두 허용. 여러 열이 와도 첫 번째만 쓴다.
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return str(value or "").strip().upper()


@dataclass(frozen=True)
class SheetLayout:
    sheet_id: str
    sheet_name: str
    date_range: RangeRef
    metric_columns: Tuple[Tuple[str, ColumnRule], ...]
    row_offsets: Tuple[int, ...]
    surname_range: Optional[RangeRef] = None
    date_format: Optional[str] = "%Y/%m/%d"

    def __post_init__(self):
        if not self.row_offsets:
            raise LayoutError("row 오프셋이 비어 있습니다.")
        if not self.metric_columns:
            raise LayoutError("기록할 지표가 없습니다.")
        for metric, rule in self.metric_columns:
            if isinstance(rule, ByLabel):
                try:
                    letter_to_index(rule.label)
                except ValueError as exc:
                    raise LayoutError(f"{metric}: {exc}") from None
            elif not isinstance(rule, ByOffset):
                raise LayoutError(f"{metric}: 알 수 없는 열 규칙 {rule!r}")

    @property
    def metrics(self) -> Tuple[str, ...]:
        return tuple(metric for metric, _ in self.metric_columns)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SheetLayout":
        """설정 dict → SheetLayout.

        cell_offsets.col 에 i번째 값이 있으면 i번째 지표는 날짜 셀 기준 오프셋,
        없으면 cell[지표] 의 열 문자를 쓴다. 둘 다 없으면 LayoutError.
        """
        cells: Mapping[str, Any] = config.get("cell") or {}
        offsets: Mapping[str, Sequence[int]] = config.get("cell_offsets") or {}
        col_offsets = list(offsets.get("col") or [])
        row_offsets = tuple(int(r) for r in (offsets.get("row") or []))

        rules = []
        for index, (metric, column) in enumerate(cells.items()):
            if index < len(col_offsets) and col_offsets[index] is not None:
                rules.append((metric, ByOffset(int(col_offsets[index]))))
                continue
            label = _column_label(column)
            if not label:
                raise LayoutError(f"{metric}: 열 오프셋도 열 문자도 없습니다.")
            rules.append((metric, ByLabel(label)))

        surname_range = config.get("surname_range")
        kwargs: Dict[str, Any] = {}
        if "date_format" in config:
            kwargs["date_format"] = config["date_format"] or None
        return cls(
            sheet_id=str(config.get("sheet_id") or ""),
            sheet_name=str(config.get("sheet_name") or ""),
            date_range=RangeRef.parse(config.get("date_range") or ""),
            surname_range=RangeRef.parse(surname_range) if surname_range else None,
            metric_columns=tuple(rules),
            row_offsets=row_offsets,
            **kwargs,
        )

    # 시트명이 비어 있으면 담당자 이름 시트를 쓴다 (담당자별 시프트표)
    def for_manager(self, manager: str) -> "SheetLayout":
        if self.sheet_name:
            return self
        return dataclasses.replace(self, sheet_name=manager)
