import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logger(name=None, log_level="INFO", log_dir="logs"):
    """Console + rotating file output. Safe to call more than once."""
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(console_handler)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path / "vcardbot.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)

    # PTB and httpx log every poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger
