"""Logging configuration."""

import logging
import sys

from portfolio_tracker.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_to_file: bool = False) -> None:
    """
    Configure application logging.

    Console logs go to stderr so tables printed on stdout stay readable.
    With log_to_file, records are also written to <data_dir>/logs/.
    """
    settings = get_settings()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_to_file:
        log_path = settings.get_log_dir() / "portfolio_tracker.log"
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Reduce noise from third-party libraries
    for noisy in ("yfinance", "sqlalchemy.engine", "urllib3", "peewee"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
