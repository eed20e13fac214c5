"""Logging setup: one stderr handler on the root logger, level from config. stdout stays free for CLI output."""

import logging
import sys

from landmark_lens.core.config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at DEBUG (connection pool chatter, SQL echo).
_QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine", "multipart")


def setup_logging(level: str | None = None) -> None:
    """
    Configure application logging.

    Invariants:
    - Calling this more than once replaces the previous handlers instead of duplicating them.
    - The root level comes from the explicit argument, else Settings.log_level.
    - urllib3/SQLAlchemy engine loggers are held at WARNING so DEBUG runs stay readable.
    """
    resolved = (level or get_config().log_level).upper()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(resolved)
    for h in root.handlers[:]:
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    root.addHandler(console)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
