import pandas as pd

from conftest import TODAY, GridSheet, build_rows
from x_follower_report import notify, settings
from x_follower_report.layout import SheetLayout
from x_follower_report.writer import write_to_sheet


class FakeSlack:

    def __init__(self):
        self.messages = []

    def chat_postMessage(self, **kwargs):
        self.messages.append(kwargs)
        return {"ok": True}


def _report(dry_run=False):
    sheet = GridSheet(build_rows({(10, 1): "2026/10/19"}))
    layout = SheetLayout.from_config({
        "sheet_id": "sid",
        "sheet_name": "report",
        "date_range": "A:A",
        "cell": {"followers": ["D"]},
        "cell_offsets": {"row": [0, 1]},
        "date_format": "%Y/%m/%d",
    })
    accounts = [("a", {"followers": 1}), ("b", {"followers": 2})]
    return write_to_sheet(lambda sid, name: sheet, layout, "岸", accounts, dry_run=dry_run, today=TODAY)


def test_summary_table_block_header_and_alignment():
    table = notify.summary_table_block(notify.summarize_reports([_report()]))
    assert table["type"] == "table"
    assert [c["text"] for c in table["rows"][0]] == notify.SUMMARY_COLUMNS
    assert [c["text"] for c in table["rows"][1]] == ["岸", "report", "R10C1", "2", "2", "0", "live"]
    settings_by_column = dict(zip(notify.SUMMARY_COLUMNS, table["column_settings"]))
    assert settings_by_column["manager"] == {"is_wrapped": True}
    assert settings_by_column["cells"] == {"align": "right"}
    assert settings_by_column["mode"] == {}


def test_summary_table_block_blank_cells_and_overflow():
    summary = pd.DataFrame(
        [{"manager": f"m{i}", "sheet": None, "anchor": "R1C1", "cells": 1, "applied": 1, "failed": 0, "mode": "live"}
         for i in range(3)]
    )
    table = notify.summary_table_block(summary, max_rows=2)
    # 헤더 + 2행 + 생략 표시 행
    assert len(table["rows"]) == 4
    assert table["rows"][1][1]["text"] == ""
    assert table["rows"][3][0]["text"] == "+1"


def test_summarize_reports():
    df = notify.summarize_reports([_report(), _report(dry_run=True)])
    assert df["cells"].tolist() == [2, 2]
    assert df["applied"].tolist() == [2, 0]
    assert df["mode"].tolist() == ["live", "dry-run"]
    assert df["anchor"].iloc[0] == "R10C1"


def test_post_report_summary_sends_table():
    client = FakeSlack()
    ok = notify.post_report_summary([_report()], errors=["team/田中: 없음"], client=client, channel="C1")
    assert ok
    message = client.messages[0]
    assert message["channel"] == "C1"
    assert "오류 1건" in message["text"]
    assert message["blocks"][0]["rows"][1][0]["text"] == "岸"


def test_post_report_summary_skipped_without_config(monkeypatch):
    monkeypatch.setattr(settings, "SLACK_BOT_TOKEN", None)
    monkeypatch.setattr(settings, "SLACK_CHANNEL", "")
    assert notify.post_report_summary([_report()]) is False


def test_airflow_callbacks_post_status(monkeypatch):
    client = FakeSlack()
    monkeypatch.setattr(notify, "_client", lambda token: client)
    monkeypatch.setattr(settings, "SLACK_CHANNEL", "C1")

    class Dag:
        dag_id = "x_follower_report"

    class TI:
        task_id = "write_x_followers"

    context = {"dag": Dag(), "task_instance": TI(), "ds": "2026-10-19", "exception": ValueError("boom")}
    notify.airflow_failed_callback(context)
    notify.airflow_success_message(context)
    assert client.messages[0]["text"].startswith("[실패] dag=x_follower_report task=write_x_followers")
    assert "boom" in client.messages[0]["text"]
    assert client.messages[1]["text"].startswith("[성공]")
