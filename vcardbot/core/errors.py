class VcardBotError(Exception):
    """Base class for every error raised by the bot."""


class InsufficientStock(VcardBotError):
    def __init__(self, pool, requested, available):
        super().__init__(
            f"pool {pool} has {available} entries, {requested} requested"
        )
        self.pool = pool
        self.requested = requested
        self.available = available


class RemoteStoreFailure(VcardBotError):
    """A Sheets read/clear/append/update call failed."""


class DeliveryFailure(RemoteStoreFailure):
    """A Telegram send failed. No partial-delivery recovery exists."""


class ReportUpdateFailure(VcardBotError):
    """The daily report could not be written. The withdrawal still stands."""
