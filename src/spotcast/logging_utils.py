from __future__ import annotations

import logging
import os
import sys
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None, format_string: str = DEFAULT_LOG_FORMAT) -> None:
    """
    Single stdout handler on the root logger.
    Level: argument, else $LOG_LEVEL, else INFO.
    """
    log_level = level or os.environ.get("LOG_LEVEL", "INFO")
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string))
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # chatty HTTP internals
    logging.getLogger("urllib3").setLevel(logging.WARNING)
