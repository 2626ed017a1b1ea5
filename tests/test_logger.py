# File: tests/test_logger.py
import logging
from logging.handlers import RotatingFileHandler

from site_mapper.logger import LOGGER_NAME, configure, init_logging


def test_configure_replaces_previous_handlers():
    configure(level="DEBUG")
    lg = configure(level="WARNING")
    assert lg is logging.getLogger(LOGGER_NAME)
    assert len(lg.handlers) == 1
    assert lg.level == logging.WARNING
    assert lg.propagate is False


def test_init_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "crawl.log"
    lg = init_logging("INFO", log_file=log_file, log_format="%(levelname)s %(message)s")
    assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)

    lg.info("Visiting: %s", "http://localhost:4321/")
    for handler in lg.handlers:
        handler.flush()
    assert log_file.read_text(encoding="utf-8").strip() == "INFO Visiting: http://localhost:4321/"

    configure(level="DEBUG")
    assert not any(isinstance(h, RotatingFileHandler) for h in lg.handlers)
