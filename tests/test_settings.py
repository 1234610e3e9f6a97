from x_follower_report import settings


def test_layout_date_format_override(monkeypatch):
    monkeypatch.setenv("TEAM_MANAGEMENT_DATE_FORMAT", "%m/%d")
    assert settings.layout_date_format("TEAM_MANAGEMENT") == "%m/%d"


def test_layout_date_format_falls_back_to_global(monkeypatch):
    monkeypatch.delenv("SHIFT_TABLE_DATE_FORMAT", raising=False)
    monkeypatch.setattr(settings, "DATE_FORMAT", "%Y-%m-%d")
    assert settings.layout_date_format("SHIFT_TABLE") == "%Y-%m-%d"


def test_presets_carry_a_date_format():
    for config in settings.SHEET_LAYOUTS.values():
        assert config["date_format"]
