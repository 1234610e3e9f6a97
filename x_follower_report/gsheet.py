import logging
import socket
import time
from typing import Any, Callable, Dict, List

import gspread
import requests
from google.oauth2 import service_account
from gspread.exceptions import APIError
from gspread.utils import rowcol_to_a1

from x_follower_report import settings

logger = logging.getLogger(__name__)


# ---------- Google Sheets ----------
def authorize_gspread(json_keyfile: str) -> gspread.Client:
    scope = [
        "https://www.googleapis.com/auth/drive",
        "https://www.googleapis.com/auth/spreadsheets",
        "https://spreadsheets.google.com/feeds",
    ]
    creds = service_account.Credentials.from_service_account_file(json_keyfile, scopes=scope)
    return gspread.authorize(creds)


def safe_sheet_name(name: str) -> str:
    escaped = str(name).replace("'", "''")
    return f"'{escaped}'"


# API 요청이 일시적으로 실패할 때 재시도
def call_with_retry(func: Callable[[], Any], description: str) -> Any:
    for attempt in range(1, settings.GOOGLE_RETRIES + 1):
        try:
            return func()
        except (TimeoutError, socket.timeout, requests.RequestException, APIError) as exc:
            if attempt >= settings.GOOGLE_RETRIES:
                raise RuntimeError(f"{description} 실패: {exc}") from exc
            sleep_seconds = settings.GOOGLE_RETRY_BACKOFF ** (attempt - 1)
            logger.warning(
                f"{description} 실패 (시도 {attempt}/{settings.GOOGLE_RETRIES}): {exc} -> {sleep_seconds:.1f}s 대기"
            )
            time.sleep(sleep_seconds)


class GspreadSheet:
    """워크시트 하나를 감싼 시트 핸들.

    읽기는 바로 worksheet.get, 쓰기는 모아뒀다가 flush 때 1회 values_batch_update.
    """

    def __init__(self, worksheet: gspread.Worksheet, value_input_option: str = "RAW"):
        self.worksheet = worksheet
        self.value_input_option = value_input_option
        self.pending: List[Dict[str, Any]] = []

    @property
    def title(self) -> str:
        return self.worksheet.title

    def get_range(self, ref: str) -> List[List[Any]]:
        values = call_with_retry(
            lambda: self.worksheet.get(ref),
            f"{self.title} {ref} 조회",
        )
        return [list(row) for row in values]

    def set_cell_value(self, row: int, col: int, value: Any) -> None:
        cell_ref = rowcol_to_a1(row, col)
        self.pending.append({
            "range": f"{safe_sheet_name(self.title)}!{cell_ref}",
            "values": [[value]],
        })

    def flush(self) -> int:
        if not self.pending:
            return 0
        data = list(self.pending)
        call_with_retry(
            lambda: self.worksheet.spreadsheet.values_batch_update(
                {"valueInputOption": self.value_input_option, "data": data}
            ),
            f"{self.title} 셀 {len(data)}개 업데이트",
        )
        self.pending.clear()
        return len(data)


def sheet_opener(gc: gspread.Client) -> Callable[[str, str], GspreadSheet]:
    # 같은 스프레드시트를 여러 번 열지 않도록 캐시
    spreadsheets: Dict[str, gspread.Spreadsheet] = {}

    def open_sheet(sheet_id: str, sheet_name: str) -> GspreadSheet:
        if sheet_id not in spreadsheets:
            spreadsheets[sheet_id] = call_with_retry(
                lambda: gc.open_by_key(sheet_id), f"스프레드시트 {sheet_id} 열기"
            )
        worksheet = spreadsheets[sheet_id].worksheet(sheet_name)
        return GspreadSheet(worksheet)

    return open_sheet
