import io

from telegram.error import TelegramError

from vcardbot.core.errors import DeliveryFailure


class TelegramMessenger:
    """send_text / send_document over a telegram Bot, errors as DeliveryFailure."""

    def __init__(self, bot):
        self.bot = bot

    async def send_text(self, chat_id, text):
        try:
            await self.bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as e:
            raise DeliveryFailure(f"send_message to {chat_id}: {e}") from e

    async def send_document(self, chat_id, data, filename, content_type):
        # Telegram derives the MIME type from the filename; content_type is
        # kept for callers and logs.
        try:
            await self.bot.send_document(
                chat_id=chat_id, document=io.BytesIO(data), filename=filename
            )
        except TelegramError as e:
            raise DeliveryFailure(f"send_document {filename} ({content_type}) to {chat_id}: {e}") from e
