#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
X(Twitter) 팔로워/팔로잉 수 → 구글 시트 일보 기록

흐름:
- 계정 목록 시트에서 담당자별 계정명을 읽는다 (MANAGER_RANGE / USERNAME_RANGE)
- 계정마다 X API 로 public_metrics 조회 (키는 계정 순서대로 돌려 씀, 계정당 대기)
- TARGET_LAYOUTS 에 지정한 시트마다 오늘 날짜 행을 찾아 기록
- 결과 요약을 슬랙으로 전송

필수 .env
  GOOGLE_KEYFILE=<서비스 계정 JSON 경로>
  ACCOUNT_SHEET_ID=<계정 목록 스프레드시트 ID>
  X_API_KEYS=<bearer token,bearer token,...>   # TEST_MODE=1 이면 불필요

선택 .env
  TARGET_LAYOUTS=personal_report,team_management
  DRY_RUN=1              # 시트에 쓰지 않고 로그만
  TEST_MODE=1            # API 대신 난수
  STRICT_MANAGER=1       # 담당자 행 못 찾으면 오류 처리
  API_DELAY_SECONDS=1.0
"""
import logging
import time
from typing import Any, Dict, List, Sequence, Tuple

from gspread.exceptions import APIError, WorksheetNotFound

from x_follower_report import settings
from x_follower_report.accounts import get_manager_accounts
from x_follower_report.errors import AnchorNotFound, LayoutError
from x_follower_report.gsheet import authorize_gspread, sheet_opener
from x_follower_report.layout import SheetLayout
from x_follower_report.notify import post_report_summary
from x_follower_report.writer import SheetOpener, WriteReport, write_to_sheet
from x_follower_report.x_api import get_user_metrics

logger = logging.getLogger("x_follower_report")

METRIC_NAMES = ("followers", "following")


def collect_manager_metrics(
    accounts: Sequence[str],
    api_keys: Sequence[str],
    test_mode: bool = False,
    delay: float = 0.0,
    error_value: Any = "ERROR",
) -> List[Tuple[str, Dict[str, Any]]]:
    """계정 순서를 유지한 (계정, 지표) 목록. 실패한 계정은 지표마다 error_value."""
    results: List[Tuple[str, Dict[str, Any]]] = []
    for index, account in enumerate(accounts):
        api_key = api_keys[index % len(api_keys)] if api_keys else ""
        try:
            metrics = get_user_metrics(account, api_key, test_mode=test_mode)
        except Exception as exc:
            logger.warning(f"{account} 지표 조회 실패: {exc}")
            metrics = {name: error_value for name in METRIC_NAMES}
        results.append((account, metrics))
        # API 요청 제한 대응
        if not test_mode and delay > 0:
            time.sleep(delay)
    return results


def load_layouts(names: Sequence[str]) -> List[Tuple[str, SheetLayout]]:
    layouts = []
    for name in names:
        config = settings.SHEET_LAYOUTS.get(name)
        if config is None:
            raise LayoutError(f"알 수 없는 레이아웃: {name}")
        if not config.get("sheet_id"):
            raise LayoutError(f"{name}: sheet_id 가 없습니다(.env)")
        layouts.append((name, SheetLayout.from_config(config)))
    return layouts


def log_report(report: WriteReport) -> None:
    anchor = report.anchor
    logger.info(
        f"[{report.sheet_name}] {report.manager}: 기준 셀 R{anchor.row}C{anchor.col} "
        f"(날짜 행 {anchor.date_row}, 담당자 행 {anchor.manager.status.value})"
    )
    for entry in report.entries:
        if entry.error:
            logger.error(f"셀 ({entry.address}) 기록 실패: {entry.error}")
        elif report.dry_run:
            logger.info(f"[dry-run] 셀 ({entry.address}) 에 \"{entry.value}\" 기록 예정")
        else:
            logger.info(f"셀 ({entry.address}) 에 \"{entry.value}\" 기록")


def run(
    open_sheet: SheetOpener,
    manager_accounts: Dict[str, List[str]],
    layouts: Sequence[Tuple[str, SheetLayout]],
    api_keys: Sequence[str],
    test_mode: bool = False,
    dry_run: bool = False,
    strict_manager: bool = False,
    delay: float = 0.0,
) -> Tuple[List[WriteReport], List[str]]:
    reports: List[WriteReport] = []
    errors: List[str] = []
    for manager, accounts in manager_accounts.items():
        logger.info(f"[{manager}] 계정 {len(accounts)}개 조회 시작")
        account_metrics = collect_manager_metrics(
            accounts,
            api_keys,
            test_mode=test_mode,
            delay=delay,
            error_value=settings.METRIC_ERROR_VALUE,
        )
        for name, layout in layouts:
            try:
                report = write_to_sheet(
                    open_sheet,
                    layout,
                    manager,
                    account_metrics,
                    dry_run=dry_run,
                    strict_manager=strict_manager,
                    tz_name=settings.REPORT_TIMEZONE,
                )
            except AnchorNotFound as exc:
                logger.error(f"[{name}] {manager}: {exc}")
                errors.append(f"{name}/{manager}: {exc}")
                continue
            except WorksheetNotFound:
                logger.error(f"[{name}] {manager}: 시트 없음")
                errors.append(f"{name}/{manager}: 시트 없음")
                continue
            except (APIError, RuntimeError) as exc:
                # 시트 열기/조회 재시도 실패 → 다음 담당자로 계속
                logger.error(f"[{name}] {manager}: 시트 접근 실패: {exc}")
                errors.append(f"{name}/{manager}: {exc}")
                continue
            log_report(report)
            reports.append(report)
            if report.failed:
                errors.append(f"{name}/{manager}: 셀 {len(report.failed)}개 기록 실패")
    return reports, errors


def main():
    settings.setup_logging()
    if not settings.GOOGLE_KEYFILE:
        raise SystemExit("GOOGLE_KEYFILE이 없습니다(.env)")
    if not settings.ACCOUNT_SHEET_ID:
        raise SystemExit("ACCOUNT_SHEET_ID가 없습니다(.env)")
    if not settings.TEST_MODE and not settings.X_API_KEYS:
        raise SystemExit("X_API_KEYS가 없습니다(.env)")

    try:
        layouts = load_layouts(settings.TARGET_LAYOUTS)
    except LayoutError as exc:
        raise SystemExit(f"레이아웃 설정 오류: {exc}") from exc

    gc = authorize_gspread(settings.GOOGLE_KEYFILE)
    open_sheet = sheet_opener(gc)

    account_sheet = open_sheet(settings.ACCOUNT_SHEET_ID, settings.ACCOUNT_SHEET_NAME)
    manager_accounts = get_manager_accounts(
        account_sheet, settings.MANAGER_RANGE, settings.USERNAME_RANGE
    )
    if not manager_accounts:
        logger.info("대상 계정 없음 → 종료")
        return
    logger.info(f"담당자 {len(manager_accounts)}명: {', '.join(manager_accounts.keys())}")

    reports, errors = run(
        open_sheet,
        manager_accounts,
        layouts,
        settings.X_API_KEYS,
        test_mode=settings.TEST_MODE,
        dry_run=settings.DRY_RUN,
        strict_manager=settings.STRICT_MANAGER,
        delay=settings.API_DELAY_SECONDS,
    )
    total = sum(len(r.applied) for r in reports)
    logger.info(f"전체 완료: 셀 {total}개 기록, 오류 {len(errors)}건")
    post_report_summary(reports, errors)


if __name__ == "__main__":
    main()
