import asyncio
from unittest.mock import AsyncMock

import pytest
from telegram.error import NetworkError

from vcardbot.bot.messenger import TelegramMessenger
from vcardbot.core.errors import DeliveryFailure


def test_send_document_names_the_file():
    bot = AsyncMock()
    messenger = TelegramMessenger(bot)

    asyncio.run(messenger.send_document(42, b"BEGIN:VCARD", "FRESH_1.vcf", "text/vcard"))

    kwargs = bot.send_document.await_args.kwargs
    assert kwargs["chat_id"] == 42
    assert kwargs["filename"] == "FRESH_1.vcf"
    assert kwargs["document"].read() == b"BEGIN:VCARD"


def test_telegram_errors_become_delivery_failures():
    bot = AsyncMock()
    bot.send_message.side_effect = NetworkError("timed out")
    messenger = TelegramMessenger(bot)

    with pytest.raises(DeliveryFailure):
        asyncio.run(messenger.send_text(42, "hi"))
