import re
from typing import Any, Dict, List, Sequence

import pandas as pd

from x_follower_report.anchor import SheetHandle

AT_MARK_RE = re.compile(r"[@＠]")


# 「@」「＠」 제거 후 트리밍
def normalize_handle(value: Any) -> str:
    return AT_MARK_RE.sub("", str(value or "")).strip()


def _first_column(values: Sequence[Sequence[Any]], length: int) -> List[Any]:
    column = [row[0] if row else "" for row in values]
    return column + [""] * (length - len(column))


def get_manager_accounts(
    sheet: SheetHandle, manager_range: str, username_range: str
) -> Dict[str, List[str]]:
    """담당자 이름을 키로 계정명 목록을 묶는다. 시트에 나온 순서를 유지."""
    managers = sheet.get_range(manager_range)
    usernames = sheet.get_range(username_range)
    length = max(len(managers), len(usernames))

    df = pd.DataFrame({
        "manager": [str(v).strip() for v in _first_column(managers, length)],
        "username": [normalize_handle(v) for v in _first_column(usernames, length)],
    })
    df = df[df["username"] != ""]
    if df.empty:
        return {}

    result: Dict[str, List[str]] = {}
    for manager, group in df.groupby("manager", sort=False):
        result[manager] = group["username"].tolist()
    return result
