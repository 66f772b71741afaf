"""Logging setup for the crewmatch CLI and for hosts embedding the scorers."""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-pair breakdowns: one DEBUG line for every leg or crew member scored
SCORING_LOGGERS = (
    "crewmatch.matching.skill_matcher",
    "crewmatch.matching.crew_search",
)


def _tune_scoring_loggers(trace_scoring: bool) -> None:
    level = logging.NOTSET if trace_scoring else logging.INFO
    for name in SCORING_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    trace_scoring: bool = False,
) -> None:
    """Configure logging for a crewmatch run.

    Args:
        level: Root log level name; defaults to settings.log_level
        log_file: Optional rotating log file; defaults to settings.log_file
        trace_scoring: Emit per-pair scoring breakdowns when the root level
            is DEBUG. Without it they stay hidden so DEBUG output is readable
            on large leg lists.
    """
    from config.settings import settings

    _tune_scoring_loggers(trace_scoring)

    root = logging.getLogger()
    if root.handlers:
        # Host application already owns the root handlers
        return

    level = level or settings.log_level
    log_file = log_file or settings.log_file
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in ("pydantic", "yaml"):
        logging.getLogger(name).setLevel(logging.WARNING)
