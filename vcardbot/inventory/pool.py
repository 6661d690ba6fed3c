"""Inventory pools: one sheet column of phone numbers per pool."""

import re
import logging
from dataclasses import dataclass

from vcardbot.core.errors import RemoteStoreFailure
from vcardbot.integrations.google_sheets import cell, column_range
from vcardbot.memory import staging

MIN_DIGITS = 10

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pool:
    tag: str  # command tag, e.g. "vcardfresh"
    column: str
    label: str  # shown in card names and file names
    category: str  # report counter this pool feeds: "fresh" or "fu"


def build_pools(fresh_tag, fresh_column, fu_tag, fu_column):
    """Pool table keyed by lowercase command tag."""
    pools = [
        Pool(tag=fresh_tag.lower(), column=fresh_column, label="FRESH", category="fresh"),
        Pool(tag=fu_tag.lower(), column=fu_column, label="FU", category="fu"),
    ]
    return {p.tag: p for p in pools}


def normalize_entries(rows):
    """Digits-only numbers from raw column rows; anything under 10 digits is dropped."""
    numbers = []
    for row in rows:
        raw = str(row[0]) if row else ""
        digits = re.sub(r"\D", "", raw)
        if len(digits) >= MIN_DIGITS:
            numbers.append(digits)
    return numbers


class InventoryStore:
    def __init__(self, store, sheet, db, append_retries=3):
        self.store = store
        self.sheet = sheet
        self.db = db
        self.append_retries = max(1, append_retries)

    async def read_entries(self, pool):
        rows = await self.store.read_range(column_range(self.sheet, pool.column))
        return normalize_entries(rows)

    async def replace_entries(self, pool, remaining, trace_id="-", amount=0, report_date=None):
        """Overwrite the pool column with `remaining`, order preserved.

        Staged in the local journal before the clear, together with the report
        increment (`amount` for `report_date`) the withdrawal still owes. If the
        clear fails the pool is untouched and the journal row is aborted; if
        every write attempt fails the row stays pending for `recover_pending`.
        Returns the journal id, to be settled with `settle_report`.
        """
        commit_id = staging.stage(
            self.db, trace_id, pool.tag, remaining,
            category=pool.category, amount=amount, report_date=report_date,
        )
        try:
            await self.store.clear_range(column_range(self.sheet, pool.column))
        except RemoteStoreFailure:
            staging.mark(self.db, commit_id, staging.ABORTED)
            raise

        await self._write_with_retry(pool, remaining, trace_id)
        staging.mark_pool_written(self.db, commit_id)
        staging.supersede(self.db, pool.tag, commit_id)
        return commit_id

    def settle_report(self, commit_id):
        """The report increment staged with `commit_id` has landed."""
        staging.mark(self.db, commit_id, staging.COMMITTED)

    async def recover_pending(self, pools, aggregator=None):
        """Finish withdrawals a previous run staged but never completed.

        Pool snapshots still pending are written back first; then, if an
        `aggregator` is given, every owed report increment is applied to the
        day it was staged for.
        """
        recovered = 0
        for commit_id, trace_id, tag, entries in staging.get_pending(self.db):
            pool = pools.get(tag)
            if pool is None:
                log.warning(f"[recover] [{trace_id}] unknown pool {tag}, aborting commit {commit_id}")
                staging.mark(self.db, commit_id, staging.ABORTED)
                continue
            log.warning(f"[recover] [{trace_id}] replaying {len(entries)} entries into {pool.label}")
            await self.store.clear_range(column_range(self.sheet, pool.column))
            await self._write_with_retry(pool, entries, trace_id)
            staging.mark_pool_written(self.db, commit_id)
            recovered += 1

        if aggregator is None:
            return recovered

        for commit_id, trace_id, category, amount, report_date in staging.get_report_pending(self.db):
            log.warning(f"[recover] [{trace_id}] replaying report {category} +{amount} for {report_date}")
            await aggregator.record_withdrawal(category, amount, date=report_date)
            self.settle_report(commit_id)
            recovered += 1
        return recovered

    async def _write_with_retry(self, pool, entries, trace_id):
        """Append `entries` to a freshly cleared column.

        A failed append may still have landed rows, so every retry clears the
        column again before appending the whole list.
        """
        if not entries:
            return
        rows = [[n] for n in entries]
        for attempt in range(1, self.append_retries + 1):
            try:
                if attempt > 1:
                    await self.store.clear_range(column_range(self.sheet, pool.column))
                await self.store.append_rows(cell(self.sheet, pool.column, 1), rows)
                return
            except RemoteStoreFailure:
                log.error(f"[inventory] [{trace_id}] write attempt {attempt}/{self.append_retries} failed for {pool.label}")
                if attempt == self.append_retries:
                    raise
