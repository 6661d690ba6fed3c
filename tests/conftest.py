import asyncio
import re
from datetime import datetime, timezone

import pytest

from vcardbot.core.errors import DeliveryFailure, RemoteStoreFailure
from vcardbot.inventory.pool import InventoryStore, build_pools
from vcardbot.memory.database import init_db
from vcardbot.reporting.report import ReportAggregator, ReportStore

INVENTORY = "DB CUAN"
REPORT = "REPORT"

_RANGE = re.compile(
    r"^(?P<sheet>'(?:[^']|'')+'|[^!]+)!(?P<c1>[A-Z]+)(?P<r1>\d*)(?::(?P<c2>[A-Z]+)(?P<r2>\d*))?$"
)


def _col(letters):
    n = 0
    for ch in letters:
        n = n * 26 + ord(ch) - ord("A") + 1
    return n - 1


def _parse(range_spec):
    m = _RANGE.match(range_spec)
    assert m, f"bad range {range_spec}"
    sheet = m.group("sheet")
    if sheet.startswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    c1 = _col(m.group("c1"))
    r1 = int(m.group("r1")) - 1 if m.group("r1") else 0
    if m.group("c2") is None:
        # single cell
        return sheet, c1, r1, c1, r1
    c2 = _col(m.group("c2"))
    r2 = int(m.group("r2")) - 1 if m.group("r2") else None
    return sheet, c1, r1, c2, r2


def _empty(value):
    return value is None or value == ""


class FakeSheets:
    """In-memory stand-in for the Sheets values API, A1 ranges included."""

    def __init__(self):
        self.grids = {}
        self.calls = []
        self._failures = {}
        self._late_failures = {}

    def fail_next(self, op, times=1):
        self._failures[op] = self._failures.get(op, 0) + times

    def fail_after_next(self, op, times=1):
        """The write lands, then the call still reports a failure."""
        self._late_failures[op] = self._late_failures.get(op, 0) + times

    def set_column(self, sheet, letter, values):
        grid = self.grids.setdefault(sheet, [])
        for r, value in enumerate(values):
            self._set(grid, r, _col(letter), value)

    def set_rows(self, sheet, rows, start_row=1):
        grid = self.grids.setdefault(sheet, [])
        for i, row in enumerate(rows):
            for c, value in enumerate(row):
                self._set(grid, start_row - 1 + i, c, value)

    def column(self, sheet, letter):
        c = _col(letter)
        values = [row[c] if c < len(row) else "" for row in self.grids.get(sheet, [])]
        while values and _empty(values[-1]):
            values.pop()
        return [str(v) for v in values]

    def rows(self, sheet):
        return [[str(v) for v in row] for row in self.grids.get(sheet, []) if any(not _empty(v) for v in row)]

    async def read_range(self, range_spec):
        await self._enter("read", range_spec)
        sheet, c1, r1, c2, r2 = _parse(range_spec)
        grid = self.grids.get(sheet, [])
        last = len(grid) - 1 if r2 is None else min(r2, len(grid) - 1)
        out = []
        for r in range(r1, last + 1):
            row = grid[r]
            values = [str(row[c]) if c < len(row) and not _empty(row[c]) else "" for c in range(c1, c2 + 1)]
            while values and values[-1] == "":
                values.pop()
            out.append(values)
        while out and not out[-1]:
            out.pop()
        return out

    async def clear_range(self, range_spec):
        await self._enter("clear", range_spec)
        sheet, c1, r1, c2, r2 = _parse(range_spec)
        grid = self.grids.get(sheet, [])
        last = len(grid) - 1 if r2 is None else min(r2, len(grid) - 1)
        for r in range(r1, last + 1):
            for c in range(c1, min(c2 + 1, len(grid[r]))):
                grid[r][c] = ""
        self._leave("clear")

    async def append_rows(self, range_spec, rows):
        await self._enter("append", range_spec)
        sheet, c1, r1, _, _ = _parse(range_spec)
        grid = self.grids.setdefault(sheet, [])
        width = max(len(row) for row in rows)
        start = r1
        for r in range(r1, len(grid)):
            if any(c < len(grid[r]) and not _empty(grid[r][c]) for c in range(c1, c1 + width)):
                start = r + 1
        for i, row in enumerate(rows):
            for j, value in enumerate(row):
                self._set(grid, start + i, c1 + j, value)
        self._leave("append")

    async def update_range(self, range_spec, rows):
        await self._enter("update", range_spec)
        sheet, c1, r1, _, _ = _parse(range_spec)
        grid = self.grids.setdefault(sheet, [])
        for i, row in enumerate(rows):
            for j, value in enumerate(row):
                self._set(grid, r1 + i, c1 + j, value)
        self._leave("update")

    async def _enter(self, op, range_spec):
        await asyncio.sleep(0)
        self.calls.append((op, range_spec))
        if self._failures.get(op):
            self._failures[op] -= 1
            raise RemoteStoreFailure(f"sheets {op} failed: injected")

    def _leave(self, op):
        if self._late_failures.get(op):
            self._late_failures[op] -= 1
            raise RemoteStoreFailure(f"sheets {op} failed after writing: injected")

    @staticmethod
    def _set(grid, r, c, value):
        while len(grid) <= r:
            grid.append([])
        row = grid[r]
        while len(row) <= c:
            row.append("")
        row[c] = value


class FakeMessenger:
    def __init__(self):
        self.texts = []
        self.documents = []
        self.failing_chats = set()
        self._document_failures = 0

    def fail_documents(self, times=1):
        self._document_failures += times

    async def send_text(self, chat_id, text):
        await asyncio.sleep(0)
        if chat_id in self.failing_chats:
            raise DeliveryFailure(f"send_message to {chat_id}: blocked")
        self.texts.append((chat_id, text))

    async def send_document(self, chat_id, data, filename, content_type):
        await asyncio.sleep(0)
        if self._document_failures:
            self._document_failures -= 1
            raise DeliveryFailure(f"send_document {filename} to {chat_id}: blocked")
        self.documents.append((chat_id, filename, data, content_type))

    def texts_to(self, chat_id):
        return [text for cid, text in self.texts if cid == chat_id]


def phone(i):
    return f"0812{i:08d}"


@pytest.fixture
def db(tmp_path):
    conn = init_db(str(tmp_path / "db" / "vcardbot.db"))
    yield conn
    conn.close()


@pytest.fixture
def sheets():
    fake = FakeSheets()
    fake.set_rows(REPORT, [["DATE", "FRESH_OUT", "FU_OUT"]])
    return fake


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def pools():
    return build_pools("vcardfresh", "A", "vcardfu", "D")


@pytest.fixture
def inventory(sheets, db):
    return InventoryStore(sheets, INVENTORY, db, append_retries=3)


@pytest.fixture
def now():
    # 20:00 UTC is 03:00 the next day at UTC+7
    return datetime(2026, 2, 15, 20, 0, tzinfo=timezone.utc)


@pytest.fixture
def reports(sheets, now):
    return ReportAggregator(ReportStore(sheets, REPORT), utc_offset_hours=7, clock=lambda: now)
