import pytest

from vcardbot.core.commands import (
    InvalidMonth,
    Reset,
    ReportDate,
    ReportMonth,
    ReportToday,
    Start,
    Withdraw,
    parse_command,
)

TAGS = {"vcardfresh", "vcardfu"}


@pytest.mark.parametrize(
    "text,expected",
    [
        ("/start", Start()),
        ("/report", ReportToday()),
        ("/reset", Reset()),
        ("  /report  ", ReportToday()),
        ("/report@CuanBot", ReportToday()),
        ("/reportdate 2026-02-22", ReportDate(date="2026-02-22")),
        ("/reportmonth 2 2026", ReportMonth(month=2, year=2026)),
        ("/reportmonth 12 2025", ReportMonth(month=12, year=2025)),
        ("#vcardfresh 10", Withdraw(tag="vcardfresh", count=10)),
        ("#VCARDFU 3", Withdraw(tag="vcardfu", count=3)),
        ("#vcardfu 3 please", Withdraw(tag="vcardfu", count=3)),
    ],
)
def test_parses_known_commands(text, expected):
    assert parse_command(text, TAGS) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "hello",
        "#vcardfresh",
        "#vcardfresh abc",
        "#vcardfresh 0",
        "#vcardother 5",
        "vcardfresh 5",
        "/reportdate",
        "/reportdate 22-02-2026",
        "/reportmonth 2026",
        "/reportmonth feb 2026",
        "/reports",
    ],
)
def test_malformed_text_is_ignored(text):
    assert parse_command(text, TAGS) is None


@pytest.mark.parametrize("month", [0, 13, 99])
def test_out_of_range_month_is_flagged(month):
    assert parse_command(f"/reportmonth {month} 2026", TAGS) == InvalidMonth(month=month, year=2026)
