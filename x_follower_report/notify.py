import logging
from typing import Any, Dict, Optional, Sequence

import pandas as pd
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from x_follower_report import settings
from x_follower_report.writer import WriteReport

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["manager", "sheet", "anchor", "cells", "applied", "failed", "mode"]
# 이름 계열은 줄바꿈, 셀 수는 오른쪽 정렬
SUMMARY_COLUMN_SETTINGS = {
    "manager": {"is_wrapped": True},
    "sheet": {"is_wrapped": True},
    "cells": {"align": "right"},
    "applied": {"align": "right"},
    "failed": {"align": "right"},
}


def _raw_text(value: Any) -> Dict[str, str]:
    return {"type": "raw_text", "text": "" if pd.isna(value) else str(value)}


def summary_table_block(summary: pd.DataFrame, max_rows: int = 50) -> dict:
    """summarize_reports 결과를 슬랙 table 블록으로. 넘치는 담당자 수는 마지막 행에 표시."""
    view = summary.loc[:, SUMMARY_COLUMNS]
    rows = [[_raw_text(c) for c in SUMMARY_COLUMNS]]
    for record in view.head(max_rows).itertuples(index=False):
        rows.append([_raw_text(v) for v in record])
    hidden = len(view) - max_rows
    if hidden > 0:
        rows.append([_raw_text(f"+{hidden}")] + [_raw_text("") for _ in SUMMARY_COLUMNS[1:]])
    return {
        "type": "table",
        "column_settings": [SUMMARY_COLUMN_SETTINGS.get(c, {}) for c in SUMMARY_COLUMNS],
        "rows": rows,
    }


def summarize_reports(reports: Sequence[WriteReport]) -> pd.DataFrame:
    rows = []
    for report in reports:
        rows.append({
            "manager": report.manager,
            "sheet": report.sheet_name,
            "anchor": f"R{report.anchor.row}C{report.anchor.col}",
            "cells": len(report.entries),
            "applied": len(report.applied),
            "failed": len(report.failed),
            "mode": "dry-run" if report.dry_run else "live",
        })
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def _client(token: Optional[str]) -> Optional[WebClient]:
    if not token:
        return None
    return WebClient(token=token)


def post_report_summary(
    reports: Sequence[WriteReport],
    errors: Sequence[str] = (),
    client: Optional[WebClient] = None,
    channel: Optional[str] = None,
) -> bool:
    """실행 결과 요약을 슬랙 테이블로 보낸다. 토큰/채널이 없으면 건너뜀."""
    client = client or _client(settings.SLACK_BOT_TOKEN)
    channel = channel or settings.SLACK_CHANNEL
    if client is None or not channel:
        logger.info("슬랙 설정 없음 → 요약 전송 생략")
        return False

    table = summary_table_block(summarize_reports(reports))
    text = f"X 팔로워 기록 완료: {len(reports)}건"
    if errors:
        text += f" / 오류 {len(errors)}건\n" + "\n".join(f"- {e}" for e in errors)
    try:
        client.chat_postMessage(channel=channel, text=text, blocks=[table])
    except SlackApiError as exc:
        logger.warning(f"슬랙 전송 실패: {exc.response.get('error')}")
        return False
    return True


# ---------- Airflow 콜백 ----------
def _dag_message(context: Dict[str, Any], status: str) -> str:
    dag_id = getattr(context.get("dag"), "dag_id", "-")
    ti = context.get("task_instance")
    task_id = getattr(ti, "task_id", "-")
    run_date = context.get("logical_date") or context.get("ds") or "-"
    return f"[{status}] dag={dag_id} task={task_id} run={run_date}"


def _post_text(text: str) -> None:
    client = _client(settings.SLACK_BOT_TOKEN)
    if client is None or not settings.SLACK_CHANNEL:
        logger.info(text)
        return
    try:
        client.chat_postMessage(channel=settings.SLACK_CHANNEL, text=text)
    except SlackApiError as exc:
        logger.warning(f"슬랙 전송 실패: {exc.response.get('error')}")


def airflow_failed_callback(context: Dict[str, Any]) -> None:
    text = _dag_message(context, "실패")
    exc = context.get("exception")
    if exc:
        text += f"\n{exc}"
    _post_text(text)


def airflow_success_message(context: Dict[str, Any]) -> None:
    _post_text(_dag_message(context, "성공"))
