import logging
import os
from datetime import datetime as dt
from typing import Any, Dict, List

import pytz
from dotenv import load_dotenv

# ---------- 환경 ----------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(BASE_DIR, ".."))
load_dotenv(dotenv_path=os.path.join(PROJECT_ROOT, ".env"), override=True)
load_dotenv(dotenv_path=os.path.join(BASE_DIR, ".env"), override=True)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "y")


def _env_list(name: str, default: str = "") -> List[str]:
    return [token.strip() for token in os.getenv(name, default).split(",") if token.strip()]


GOOGLE_KEYFILE = os.getenv("GOOGLE_KEYFILE", "service_account.json")
if GOOGLE_KEYFILE and not os.path.isabs(GOOGLE_KEYFILE):
    base_candidate = os.path.join(BASE_DIR, GOOGLE_KEYFILE)
    root_candidate = os.path.join(PROJECT_ROOT, GOOGLE_KEYFILE)
    if os.path.exists(base_candidate):
        GOOGLE_KEYFILE = base_candidate
    elif os.path.exists(root_candidate):
        GOOGLE_KEYFILE = root_candidate
    else:
        GOOGLE_KEYFILE = base_candidate

GOOGLE_RETRIES = int(os.getenv("GOOGLE_RETRIES", "3"))
GOOGLE_RETRY_BACKOFF = float(os.getenv("GOOGLE_RETRY_BACKOFF", "2.0"))

# 담당자/계정 목록 시트
ACCOUNT_SHEET_ID = os.getenv("ACCOUNT_SHEET_ID", "")
ACCOUNT_SHEET_NAME = os.getenv("ACCOUNT_SHEET_NAME", "アカウント一覧｜個人")
MANAGER_RANGE = os.getenv("MANAGER_RANGE", "B18:B27")
USERNAME_RANGE = os.getenv("USERNAME_RANGE", "F18:F27")

# X API
X_API_KEYS = _env_list("X_API_KEYS")
X_API_TIMEOUT = int(os.getenv("X_API_TIMEOUT", "30"))
API_DELAY_SECONDS = float(os.getenv("API_DELAY_SECONDS", "1.0"))
METRIC_ERROR_VALUE = os.getenv("METRIC_ERROR_VALUE", "ERROR")

TEST_MODE = _env_flag("TEST_MODE")
DRY_RUN = _env_flag("DRY_RUN")
STRICT_MANAGER = _env_flag("STRICT_MANAGER")

REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "Asia/Tokyo")
DATE_FORMAT = os.getenv("DATE_FORMAT", "%Y/%m/%d")
TARGET_LAYOUTS = _env_list("TARGET_LAYOUTS", "personal_report")


# 시트마다 날짜 표시 형식이 다를 수 있음 (예: TEAM_MANAGEMENT_DATE_FORMAT=%m/%d)
def layout_date_format(prefix: str) -> str:
    return os.getenv(f"{prefix}_DATE_FORMAT") or DATE_FORMAT


SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
SLACK_CHANNEL = os.getenv("SLACK_CHANNEL", "")

# 기록 대상 시트 레이아웃
SHEET_LAYOUTS: Dict[str, Dict[str, Any]] = {
    # 계정 일보: 날짜 행에서 +0~+4 행, 팔로잉 C열 / 팔로워 D열
    "personal_report": {
        "sheet_id": os.getenv("PERSONAL_REPORT_SHEET_ID", ""),
        "sheet_name": os.getenv("PERSONAL_REPORT_SHEET_NAME", "アカウント日報"),
        "date_range": "A:A",
        "cell": {
            "following": ["C"],
            "followers": ["D"],
        },
        "cell_offsets": {"row": [0, 1, 2, 3, 4]},
        "date_format": layout_date_format("PERSONAL_REPORT"),
    },
    # 담당자별 시프트표: 시트명 = 담당자 성
    "shift_table": {
        "sheet_id": os.getenv("SHIFT_TABLE_SHEET_ID", ""),
        "sheet_name": "",
        "date_range": "A:A",
        "cell": {
            "followers": ["D"],
        },
        "cell_offsets": {"row": [0, 1, 2, 3, 4]},
        "date_format": layout_date_format("SHIFT_TABLE"),
    },
    # 팀 관리표: 5행에 날짜가 가로로, A열에 담당자 성
    "team_management": {
        "sheet_id": os.getenv("TEAM_MANAGEMENT_SHEET_ID", ""),
        "sheet_name": os.getenv("TEAM_MANAGEMENT_SHEET_NAME", "ff管理"),
        "date_range": "5:5",
        "surname_range": "A:A",
        "cell": {
            "followers": "",
            "following": "",
        },
        "cell_offsets": {"row": [0, 1, 2, 3, 4], "col": [0, 1, 2, 3]},
        "date_format": layout_date_format("TEAM_MANAGEMENT"),
    },
}


# ---------- 로깅 ----------
def setup_logging() -> logging.Logger:
    log_dir = os.path.join("logs", "x_followers")
    os.makedirs(log_dir, exist_ok=True)
    kst = pytz.timezone("Asia/Seoul")
    current_time = dt.now(kst)
    log_filename = os.path.join(
        log_dir,
        f"x_followers_{current_time.strftime('%Y%m%d_%H%M%S')}.log",
    )

    logger = logging.getLogger("x_follower_report")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    fh = logging.FileHandler(log_filename, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    sh = logging.StreamHandler()
    sh.setLevel(logging.INFO)
    sh.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(sh)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("slack_sdk").setLevel(logging.WARNING)

    return logger
