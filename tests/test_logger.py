import logging
from logging.handlers import RotatingFileHandler

import pytest

from vcardbot.logger import setup_logger


@pytest.fixture
def fresh_logger():
    name = "vcardbot.tests.logger"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_named_logger_gets_its_handlers_even_when_root_has_some(fresh_logger, tmp_path):
    root_handler = logging.NullHandler()
    logging.getLogger().addHandler(root_handler)
    try:
        logger = setup_logger(fresh_logger, log_dir=str(tmp_path))
    finally:
        logging.getLogger().removeHandler(root_handler)

    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert (tmp_path / "vcardbot.log").exists()


def test_second_call_does_not_duplicate_handlers(fresh_logger, tmp_path):
    first = setup_logger(fresh_logger, log_dir=str(tmp_path))
    count = len(first.handlers)

    second = setup_logger(fresh_logger, log_level="DEBUG", log_dir=str(tmp_path))

    assert second is first
    assert len(second.handlers) == count == 2
    assert second.level == logging.DEBUG
