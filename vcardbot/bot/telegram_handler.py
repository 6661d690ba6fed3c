import logging

from telegram import Update
from telegram.ext import ContextTypes

from vcardbot.core import messages
from vcardbot.core.commands import (
    InvalidMonth,
    Reset,
    ReportDate,
    ReportMonth,
    ReportToday,
    Start,
    Withdraw,
    parse_command,
)
from vcardbot.core.errors import RemoteStoreFailure
from vcardbot.core.queue import FulfillmentRequest

log = logging.getLogger(__name__)


def _parse(update, context):
    if not update.message or not update.message.text:
        return None
    return parse_command(update.message.text, context.bot_data["pools"])


async def handle_start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not isinstance(_parse(update, context), Start):
        return
    await update.message.reply_text(messages.start_text(context.bot_data["pools"]))


async def handle_report(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/report: today's counters."""
    if not isinstance(_parse(update, context), ReportToday):
        return
    try:
        report = await context.bot_data["reports"].get_today()
    except RemoteStoreFailure as e:
        log.error(f"[report] /report failed: {e}")
        await update.message.reply_text(messages.REPORT_FAILED)
        return
    await update.message.reply_text(messages.today_text(report))


async def handle_report_date(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/reportdate YYYY-MM-DD"""
    command = _parse(update, context)
    if not isinstance(command, ReportDate):
        return
    try:
        report = await context.bot_data["reports"].get_daily(command.date)
    except RemoteStoreFailure as e:
        log.error(f"[report] /reportdate failed: {e}")
        await update.message.reply_text(messages.REPORT_DATE_FAILED)
        return
    await update.message.reply_text(messages.date_text(command.date, report))


async def handle_report_month(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/reportmonth M YYYY"""
    command = _parse(update, context)
    if isinstance(command, InvalidMonth):
        await update.message.reply_text(messages.REPORT_MONTH_USAGE)
        return
    if not isinstance(command, ReportMonth):
        return
    try:
        summary = await context.bot_data["reports"].get_monthly(command.month, command.year)
    except RemoteStoreFailure as e:
        log.error(f"[report] /reportmonth failed: {e}")
        await update.message.reply_text(messages.REPORT_MONTH_FAILED)
        return
    await update.message.reply_text(messages.month_text(summary))


async def handle_reset(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/reset: zero today's counters, keeping the row."""
    if not isinstance(_parse(update, context), Reset):
        return
    try:
        report = await context.bot_data["reports"].reset_today()
    except RemoteStoreFailure as e:
        log.error(f"[report] /reset failed: {e}")
        await update.message.reply_text(messages.RESET_FAILED)
        return
    log.info(f"[report] reset {report.date} by user {update.effective_user.id}")
    await update.message.reply_text(messages.reset_text(report))


async def handle_withdrawal(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """#<pool> <count>: queue a withdrawal, files go to the sender's DM."""
    command = _parse(update, context)
    if not isinstance(command, Withdraw):
        return

    request = FulfillmentRequest(
        chat_id=update.effective_chat.id,
        user_id=update.effective_user.id,
        pool=context.bot_data["pools"][command.tag],
        count=command.count,
    )
    worker = context.bot_data["worker"]
    worker.enqueue(request)
    await update.message.reply_text(messages.QUEUED)
