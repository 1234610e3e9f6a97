from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple, Union

from x_follower_report.anchor import Anchor
from x_follower_report.columns import cell_address
from x_follower_report.layout import SheetLayout, resolve_column

AccountMetrics = Sequence[Tuple[str, Mapping[str, Any]]]


@dataclass(frozen=True)
class CellTarget:
    account: str
    metric: str
    row: int
    col: int
    value: Any

    @property
    def address(self) -> str:
        return cell_address(self.row, self.col)


def as_account_pairs(
    accounts: Union[AccountMetrics, Mapping[str, Mapping[str, Any]]]
) -> List[Tuple[str, Mapping[str, Any]]]:
    # dict 로 받아도 삽입 순서대로 (계정, 지표) 쌍 목록으로 맞춘다
    if isinstance(accounts, Mapping):
        return list(accounts.items())
    return [(account, metrics) for account, metrics in accounts]


def expand_targets(
    layout: SheetLayout,
    anchor: Anchor,
    accounts: Union[AccountMetrics, Mapping[str, Mapping[str, Any]]],
) -> List[CellTarget]:
    """지표(바깥) × 행 오프셋(안쪽) 순서로 기록할 셀 목록을 만든다.

    j번째 행 오프셋에는 j번째 계정이 대응한다. 계정에 해당 지표가 없으면 건너뛴다.
    """
    pairs = as_account_pairs(accounts)
    targets: List[CellTarget] = []
    for metric, rule in layout.metric_columns:
        col = resolve_column(rule, anchor.col)
        for row_index, row_offset in enumerate(layout.row_offsets):
            if row_index >= len(pairs):
                break
            account, metrics = pairs[row_index]
            if metric not in metrics:
                continue
            targets.append(
                CellTarget(
                    account=account,
                    metric=metric,
                    row=anchor.row + row_offset,
                    col=col,
                    value=metrics[metric],
                )
            )
    return targets

