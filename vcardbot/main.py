import logging

from telegram.ext import Application, CommandHandler, MessageHandler, filters

from vcardbot import config
from vcardbot.bot.messenger import TelegramMessenger
from vcardbot.bot.telegram_handler import (
    handle_report,
    handle_report_date,
    handle_report_month,
    handle_reset,
    handle_start,
    handle_withdrawal,
)
from vcardbot.core.errors import RemoteStoreFailure, ReportUpdateFailure
from vcardbot.core.worker import FulfillmentWorker
from vcardbot.integrations.google_sheets import GoogleSheetsStore, load_credentials
from vcardbot.inventory.pool import InventoryStore, build_pools
from vcardbot.logger import setup_logger
from vcardbot.memory.database import init_db
from vcardbot.reporting.report import ReportAggregator, ReportStore

log = logging.getLogger("vcardbot")


async def _on_startup(app):
    inventory = app.bot_data["inventory"]
    try:
        recovered = await inventory.recover_pending(app.bot_data["pools"], app.bot_data["reports"])
        if recovered:
            log.warning(f"[recover] replayed {recovered} unfinished withdrawal step(s)")
    except (RemoteStoreFailure, ReportUpdateFailure) as e:
        # left pending, retried on the next start
        log.error(f"[recover] replay failed: {e}")
    app.bot_data["worker"].start()


async def _on_shutdown(app):
    await app.bot_data["worker"].stop()
    app.bot_data["db"].close()


async def handle_error(update, context):
    log.error(f"[bot] update failed: {context.error}", exc_info=context.error)


def build_application():
    db = init_db(config.DATABASE_PATH)
    sheets = GoogleSheetsStore(
        config.SHEET_ID,
        load_credentials(config.GOOGLE_CREDENTIALS, config.GOOGLE_CREDENTIALS_PATH),
    )
    pools = build_pools(
        config.FRESH_POOL_TAG, config.FRESH_POOL_COLUMN,
        config.FU_POOL_TAG, config.FU_POOL_COLUMN,
    )
    inventory = InventoryStore(sheets, config.INVENTORY_SHEET, db, config.APPEND_RETRIES)
    reports = ReportAggregator(
        ReportStore(sheets, config.REPORT_SHEET),
        utc_offset_hours=config.REPORT_UTC_OFFSET_HOURS,
    )

    app = (
        Application.builder()
        .token(config.TELEGRAM_BOT_TOKEN)
        .post_init(_on_startup)
        .post_shutdown(_on_shutdown)
        .build()
    )
    worker = FulfillmentWorker(
        TelegramMessenger(app.bot), inventory, reports, db,
        group_size=config.VCARD_GROUP_SIZE,
        delivery_delay=config.DELIVERY_DELAY_SECONDS,
    )
    app.bot_data.update({
        "db": db,
        "pools": pools,
        "inventory": inventory,
        "reports": reports,
        "worker": worker,
    })

    app.add_handler(CommandHandler("start", handle_start))
    app.add_handler(CommandHandler("report", handle_report))
    app.add_handler(CommandHandler("reportdate", handle_report_date))
    app.add_handler(CommandHandler("reportmonth", handle_report_month))
    app.add_handler(CommandHandler("reset", handle_reset))
    app.add_handler(MessageHandler(filters.TEXT & filters.Regex(r"^#"), handle_withdrawal))
    app.add_error_handler(handle_error)
    return app


def main():
    setup_logger("vcardbot", config.LOG_LEVEL)

    if not config.TELEGRAM_BOT_TOKEN:
        log.error("Set TELEGRAM_BOT_TOKEN in .env")
        return
    if not config.SHEET_ID:
        log.error("Set SHEET_ID in .env")
        return
    if not config.GOOGLE_CREDENTIALS and not config.GOOGLE_CREDENTIALS_PATH:
        log.error("Set GOOGLE_CREDENTIALS or GOOGLE_CREDENTIALS_PATH in .env")
        return

    log.info("Starting vcardbot...")
    log.info(f"Sheet: {config.SHEET_ID} ({config.INVENTORY_SHEET} / {config.REPORT_SHEET})")
    log.info(f"Database: {config.DATABASE_PATH}")

    app = build_application()

    if config.WEBHOOK_URL:
        log.info(f"Webhook: {config.WEBHOOK_URL}/{config.WEBHOOK_PATH} on port {config.PORT}")
        app.run_webhook(
            listen="0.0.0.0",
            port=config.PORT,
            url_path=config.WEBHOOK_PATH,
            webhook_url=f"{config.WEBHOOK_URL}/{config.WEBHOOK_PATH}",
            allowed_updates=["message"],
        )
    else:
        log.info("No WEBHOOK_URL, long polling.")
        app.run_polling(allowed_updates=["message"])


if __name__ == "__main__":
    main()
