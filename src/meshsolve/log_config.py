# src/meshsolve/log_config.py
import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None):
    """
    Routes every log record to one console handler (stdout unless `stream` is given).

    Handlers already on the root logger are removed first, so repeated calls
    never duplicate output. `level` is a logging constant or its name.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)
    logging.getLogger(__name__).debug("Logging configured at level %s.", logging.getLevelName(level))
