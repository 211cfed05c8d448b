"""Loguru sinks for the API and CLI.

Application messages (role gate decisions, audited mutations, collaborator
failures) go to stderr as text. Per-request access records from
``RequestIdMiddleware`` are bound with ``json_output=True`` and go to stderr
as JSON lines so log shippers can parse them. Setting ``log_dir`` adds a
rotating text file alongside.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"
_LOG_FILE = "thinktank-api.log"


def _is_access_record(record: dict) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace loguru's default handler with the application's sinks.

    Args:
        log_level: Minimum level, case-insensitive.
        log_dir: Directory for ``thinktank-api.log``. Created if missing;
            the file rotates daily and keeps a week of history.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_LOG_FORMAT,
        filter=lambda record: not _is_access_record(record),
    )
    logger.add(sys.stderr, level=level, serialize=True, filter=_is_access_record)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / _LOG_FILE,
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
