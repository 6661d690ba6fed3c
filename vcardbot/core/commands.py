"""Chat text -> typed commands.

`parse_command` returns None for anything it does not recognise; the bot
stays silent on malformed input.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class ReportToday:
    pass


@dataclass(frozen=True)
class ReportDate:
    date: str


@dataclass(frozen=True)
class ReportMonth:
    month: int
    year: int


@dataclass(frozen=True)
class InvalidMonth:
    """`/reportmonth` with a month outside 1-12. The only malformed input that gets a reply."""
    month: int
    year: int


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Withdraw:
    tag: str
    count: int


_BOT = r"(?:@\w+)?"
_START = re.compile(rf"^/start{_BOT}$", re.IGNORECASE)
_REPORT = re.compile(rf"^/report{_BOT}$", re.IGNORECASE)
_RESET = re.compile(rf"^/reset{_BOT}$", re.IGNORECASE)
_REPORT_DATE = re.compile(rf"^/reportdate{_BOT}\s+(\d{{4}}-\d{{2}}-\d{{2}})$", re.IGNORECASE)
_REPORT_MONTH = re.compile(rf"^/reportmonth{_BOT}\s+(\d{{1,2}})\s+(\d{{4}})$", re.IGNORECASE)
_WITHDRAW = re.compile(r"^#(\w+)\s+(\d+)", re.IGNORECASE)


def parse_command(text, pool_tags):
    """Parse one message. `pool_tags` are the lowercase tags accepted after `#`."""
    if not text:
        return None
    text = text.strip()

    if _START.match(text):
        return Start()
    if _REPORT.match(text):
        return ReportToday()
    if _RESET.match(text):
        return Reset()

    m = _REPORT_DATE.match(text)
    if m:
        return ReportDate(date=m.group(1))

    m = _REPORT_MONTH.match(text)
    if m:
        month, year = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            return InvalidMonth(month=month, year=year)
        return ReportMonth(month=month, year=year)

    m = _WITHDRAW.match(text)
    if m:
        tag, count = m.group(1).lower(), int(m.group(2))
        if tag in pool_tags and count > 0:
            return Withdraw(tag=tag, count=count)

    return None
