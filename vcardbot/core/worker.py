"""Sequential fulfillment of withdrawal requests.

One request at a time: read the pool, send the vCard files, write the rest of
the pool back, bump the daily report, confirm. A failed request is reported to
its chat and the worker moves on to the next one.
"""

import asyncio
import logging
import sqlite3
import time
from contextlib import suppress
from dataclasses import dataclass
from typing import Optional

from vcardbot.core import messages
from vcardbot.core.errors import InsufficientStock, ReportUpdateFailure, VcardBotError
from vcardbot.core.queue import FulfillmentRequest, RequestQueue
from vcardbot.core.vcard import CONTENT_TYPE, build_documents
from vcardbot.memory.action_log import log_withdrawal
from vcardbot.reporting.report import DailyReport

DELIVERED = "delivered"
INSUFFICIENT_STOCK = "insufficient_stock"
FAILED = "failed"

log = logging.getLogger(__name__)


@dataclass
class FulfillmentOutcome:
    request: FulfillmentRequest
    status: str
    documents: int = 0
    report: Optional[DailyReport] = None


class FulfillmentWorker:
    def __init__(self, messenger, inventory, aggregator, db, queue=None,
                 group_size=5, delivery_delay=1.2):
        self.messenger = messenger
        self.inventory = inventory
        self.aggregator = aggregator
        self.db = db
        self.queue = queue if queue is not None else RequestQueue()
        self.group_size = group_size
        self.delivery_delay = delivery_delay
        self._task = None

    def enqueue(self, request):
        self.queue.enqueue(request)
        log.info(f"[queue] [{request.trace_id}] queued {request.pool.tag} x{request.count} ({len(self.queue)} waiting)")

    def start(self):
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        """Cancel the loop once the request in flight, if any, has finished."""
        if self._task is None:
            return
        async with self.queue.guard:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
        self._task = None

    async def run(self):
        """Block on the queue forever, one request at a time."""
        log.info("[queue] worker started")
        while True:
            request = await self.queue.get()
            try:
                async with self.queue.guard:
                    await self.process(request)
            finally:
                self.queue.task_done()

    async def drain(self):
        """Process whatever is queued now. No-op if busy or empty."""
        if self.queue.busy:
            return
        while True:
            request = self.queue.get_nowait()
            if request is None:
                return
            try:
                async with self.queue.guard:
                    await self.process(request)
            finally:
                self.queue.task_done()

    async def process(self, request):
        t0 = time.time()
        try:
            outcome = await self._fulfill(request)
        except InsufficientStock as e:
            log.warning(f"[queue] [{request.trace_id}] {e}")
            await self._notify(request.chat_id, messages.INSUFFICIENT_STOCK, request)
            outcome = FulfillmentOutcome(request, INSUFFICIENT_STOCK)
        except VcardBotError as e:
            log.error(f"[queue] [{request.trace_id}] failed: {e}")
            await self._notify(request.chat_id, messages.DELIVERY_FAILED, request)
            outcome = FulfillmentOutcome(request, FAILED)
        except Exception:
            log.exception(f"[queue] [{request.trace_id}] unexpected error")
            await self._notify(request.chat_id, messages.DELIVERY_FAILED, request)
            outcome = FulfillmentOutcome(request, FAILED)

        ms = int((time.time() - t0) * 1000)
        try:
            log_withdrawal(self.db, request, outcome.status, {
                "documents": outcome.documents,
                "latency_ms": ms,
            })
        except sqlite3.Error as e:
            log.error(f"[queue] [{request.trace_id}] audit log write failed: {e}")
        log.info(f"[queue] [{request.trace_id}] {outcome.status} in {ms}ms")
        return outcome

    async def _fulfill(self, request):
        pool = request.pool

        await self._notify(request.chat_id, messages.CHECK_DM, request)
        await self._notify(request.user_id, messages.PROCESSING, request)

        numbers = await self.inventory.read_entries(pool)
        if len(numbers) < request.count:
            raise InsufficientStock(pool.tag, request.count, len(numbers))

        selected = numbers[:request.count]
        remaining = numbers[request.count:]

        documents = build_documents(selected, pool.label, self.group_size)
        for doc in documents:
            await self.messenger.send_document(request.user_id, doc.data, doc.filename, CONTENT_TYPE)
            await asyncio.sleep(self.delivery_delay)
        log.info(f"[queue] [{request.trace_id}] sent {len(documents)} files, {len(remaining)} left in {pool.label}")

        day = self.aggregator.today()
        commit_id = await self.inventory.replace_entries(
            pool, remaining, request.trace_id, amount=request.count, report_date=day,
        )

        report = None
        try:
            report = await self.aggregator.record_withdrawal(pool.category, request.count, date=day)
        except ReportUpdateFailure as e:
            # stays owed in the journal, replayed on the next start
            log.error(f"[report] [{request.trace_id}] update failed: {e}")
        else:
            self.inventory.settle_report(commit_id)

        await self.messenger.send_text(request.user_id, messages.done_text(report))
        return FulfillmentOutcome(request, DELIVERED, documents=len(documents), report=report)

    async def _notify(self, chat_id, text, request):
        """Advisory message; a failure is logged, never raised."""
        try:
            await self.messenger.send_text(chat_id, text)
        except VcardBotError as e:
            log.warning(f"[queue] [{request.trace_id}] notice to {chat_id} failed: {e}")
