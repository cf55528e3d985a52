"""Centralized logging setup.

Console output only; call setup_logging() once at application start.
"""
import logging

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s.%(funcName)s  %(message)s"
_HANDLER_NAME = "asset-ledger-console"


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with a single console handler.

    Safe to call multiple times; an existing handler is reused.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid double-setup
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    console = logging.StreamHandler()
    console.set_name(_HANDLER_NAME)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    # Suppress noisy third-party loggers
    for name in ("httpx", "httpcore", "urllib3", "google_genai", "PIL", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)
