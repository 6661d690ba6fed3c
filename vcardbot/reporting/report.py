"""Daily usage report kept on the REPORT sheet.

One row per calendar day, columns DATE | FRESH | FU, starting at row 2.
Days follow a fixed UTC offset (UTC+7 by default), not the host timezone.
"""

import re
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from vcardbot.core.errors import RemoteStoreFailure, ReportUpdateFailure
from vcardbot.integrations.google_sheets import cell, open_range, row_range

FIRST_ROW = 2
CATEGORIES = ("fresh", "fu")

log = logging.getLogger(__name__)


@dataclass
class DailyReport:
    date: str
    fresh: int = 0
    fu: int = 0
    row: Optional[int] = None

    @property
    def found(self):
        return self.row is not None


@dataclass
class MonthlySummary:
    year: int
    month: int
    fresh: int
    fu: int
    days: int


def parse_count(value):
    """Leading integer of a cell, 0 when there is none."""
    match = re.match(r"\s*(\d+)", str(value if value is not None else ""))
    return int(match.group(1)) if match else 0


class ReportStore:
    """Row-level access to the REPORT sheet."""

    def __init__(self, store, sheet):
        self.store = store
        self.sheet = sheet

    async def read_all(self):
        rows = await self.store.read_range(open_range(self.sheet, "A", FIRST_ROW, "C"))
        records = []
        for i, row in enumerate(rows):
            date, fresh, fu = (list(row) + ["", "", ""])[:3]
            records.append(DailyReport(
                date=str(date).strip(),
                fresh=parse_count(fresh),
                fu=parse_count(fu),
                row=i + FIRST_ROW,
            ))
        return records

    async def append(self, report):
        await self.store.append_rows(cell(self.sheet, "A", 1), [[report.date, report.fresh, report.fu]])

    async def update(self, report):
        await self.store.update_range(
            row_range(self.sheet, report.row), [[report.date, report.fresh, report.fu]]
        )


class ReportAggregator:
    def __init__(self, report_store, utc_offset_hours=7, clock=None):
        self.reports = report_store
        self.offset = timedelta(hours=utc_offset_hours)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        # record_withdrawal and reset_today are read-modify-write on one row
        self._write_lock = asyncio.Lock()

    def today(self):
        return (self.clock() + self.offset).strftime("%Y-%m-%d")

    async def get_daily(self, date):
        for record in await self.reports.read_all():
            if record.date == date:
                return record
        return None

    async def get_today(self):
        date = self.today()
        return await self.get_daily(date) or DailyReport(date=date)

    async def get_monthly(self, month, year):
        prefix = f"{year}-{month:02d}-"
        fresh = fu = days = 0
        for record in await self.reports.read_all():
            if not record.date.startswith(prefix):
                continue
            fresh += record.fresh
            fu += record.fu
            days += 1
        return MonthlySummary(year=year, month=month, fresh=fresh, fu=fu, days=days)

    async def record_withdrawal(self, category, amount, date=None):
        """Add `amount` to the `category` counter of `date` (today by default); returns the row."""
        if category not in CATEGORIES:
            raise ValueError(f"unknown report category: {category}")
        async with self._write_lock:
            try:
                return await self._add(category, amount, date or self.today())
            except RemoteStoreFailure as e:
                raise ReportUpdateFailure(str(e)) from e

    async def reset_today(self):
        async with self._write_lock:
            date = self.today()
            record = await self.get_daily(date)
            if record is None:
                record = DailyReport(date=date)
                await self.reports.append(record)
                return record
            record.fresh = record.fu = 0
            await self.reports.update(record)
            return record

    async def _add(self, category, amount, date):
        record = await self.get_daily(date)
        if record is None:
            record = DailyReport(date=date)
            setattr(record, category, amount)
            await self.reports.append(record)
            log.info(f"[report] new day {date}: {category}={amount}")
            return record
        setattr(record, category, getattr(record, category) + amount)
        await self.reports.update(record)
        log.info(f"[report] {date}: fresh={record.fresh} fu={record.fu}")
        return record
