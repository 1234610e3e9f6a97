from typing import Any, Sequence, Tuple

from x_follower_report.errors import ValueNotFound


def match(
    values: Sequence[Sequence[Any]],
    target: Any,
    exact: bool = True,
    start_row: int = 1,
) -> Tuple[int, int]:
    """MATCH 함수처럼 2차원 값 블록에서 target 위치를 찾는다.

    행 우선(위→아래, 왼→오른쪽)으로 훑어서 처음 맞는 셀의 (row, col)을
    블록 기준 1-based로 돌려준다. exact=False면 부분 일치.
    start_row 이전 행은 보지 않는다. 행 길이가 달라도 된다(gspread는 뒤쪽 빈 셀을 잘라서 준다).
    """
    target_str = str(target)
    for row_idx in range(max(start_row, 1) - 1, len(values)):
        for col_idx, cell in enumerate(values[row_idx]):
            cell_str = str(cell)
            if exact and cell_str == target_str:
                return row_idx + 1, col_idx + 1
            if not exact and target_str in cell_str:
                return row_idx + 1, col_idx + 1
    raise ValueNotFound(f"해당하는 값을 찾지 못했습니다: {target_str!r}")
