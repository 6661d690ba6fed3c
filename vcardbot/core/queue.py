import asyncio
import uuid
from dataclasses import dataclass, field

from vcardbot.inventory.pool import Pool


def new_trace_id():
    return str(uuid.uuid4())[:8]


@dataclass(frozen=True)
class FulfillmentRequest:
    chat_id: int  # where the command was typed
    user_id: int  # who gets the files, in private chat
    pool: Pool
    count: int
    trace_id: str = field(default_factory=new_trace_id)


class RequestQueue:
    """Unbounded FIFO of pending requests plus the single-flight guard.

    `guard` is held for the whole processing of one request, so at most one
    withdrawal touches the sheet at a time.
    """

    def __init__(self):
        self._items = asyncio.Queue()
        self.guard = asyncio.Lock()

    def enqueue(self, request):
        self._items.put_nowait(request)

    def __len__(self):
        return self._items.qsize()

    @property
    def busy(self):
        return self.guard.locked()

    async def get(self):
        return await self._items.get()

    def get_nowait(self):
        try:
            return self._items.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def task_done(self):
        self._items.task_done()

    async def join(self):
        """Wait until every enqueued request has been processed."""
        await self._items.join()
