import logging
from pathlib import Path
from typing import Any

RESET = "\x1b[0m"
COLORS = {
    logging.DEBUG: "\u001b[34m",  # blue
    logging.INFO: "\u001b[32m",  # green
    logging.WARNING: "\x1b[33;20m",  # yellow
    logging.ERROR: "\x1b[31;20m",  # red
    logging.CRITICAL: "\x1b[31;1m",  # bold red
}


class ColorFormatter(logging.Formatter):
    """Colors the level name, optionally adding the source location of the record."""

    def __init__(self, log_locations: bool = False) -> None:
        super().__init__()
        self.log_locations = log_locations

    def format(self, record: logging.LogRecord) -> str:
        color = COLORS.get(record.levelno, "")
        fmt = f"{color}%(levelname)s{RESET}: %(message)s"
        if self.log_locations:
            filepath = Path(record.pathname).resolve()
            fmt += f"\n        {filepath}:%(lineno)d::%(funcName)s\n"
        return logging.Formatter(fmt).format(record)


def setup_logging(level: Any, root_log_name: str = __name__.split(".")[0]) -> None:
    main_logger = logging.getLogger(root_log_name)
    main_logger.setLevel(level)

    # don't stack handlers when called twice
    for handler in list(main_logger.handlers):
        if isinstance(handler.formatter, ColorFormatter):
            main_logger.removeHandler(handler)

    default_handler = logging.StreamHandler()
    default_handler.setLevel(level)
    default_handler.setFormatter(
        ColorFormatter(level in (logging.DEBUG, "DEBUG"))
    )
    main_logger.addHandler(default_handler)
