"""Configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()


# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "").rstrip("/")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "webhook").strip("/")
PORT = int(os.getenv("PORT", "3000"))

# Google Sheets
SHEET_ID = os.getenv("SHEET_ID", "")
GOOGLE_CREDENTIALS = os.getenv("GOOGLE_CREDENTIALS", "")
GOOGLE_CREDENTIALS_PATH = os.getenv("GOOGLE_CREDENTIALS_PATH", "")
INVENTORY_SHEET = os.getenv("INVENTORY_SHEET", "DB CUAN")
REPORT_SHEET = os.getenv("REPORT_SHEET", "REPORT")

# Pools
FRESH_POOL_TAG = os.getenv("FRESH_POOL_TAG", "vcardfresh").lower()
FRESH_POOL_COLUMN = os.getenv("FRESH_POOL_COLUMN", "A").upper()
FU_POOL_TAG = os.getenv("FU_POOL_TAG", "vcardfu").lower()
FU_POOL_COLUMN = os.getenv("FU_POOL_COLUMN", "D").upper()

# Fulfillment
VCARD_GROUP_SIZE = int(os.getenv("VCARD_GROUP_SIZE", "5"))
DELIVERY_DELAY_SECONDS = float(os.getenv("DELIVERY_DELAY_SECONDS", "1.2"))
APPEND_RETRIES = int(os.getenv("APPEND_RETRIES", "3"))

# Report
REPORT_UTC_OFFSET_HOURS = int(os.getenv("REPORT_UTC_OFFSET_HOURS", "7"))

# Database
DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/db/vcardbot.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
