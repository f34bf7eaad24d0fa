"""
Logging utilities for the addon backup migration job.
"""

import logging
import sys
from typing import Optional

# Transport libraries whose DEBUG output would drown the poll log.
QUIET_LOGGERS = ("urllib3", "google.auth")


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging for a migration run.

    Output goes to stdout (where the cron runner collects it) and, when
    log_file is given, to that file as well. Verbose mode turns on the
    per-poll DEBUG lines of the job itself; HTTP transport chatter stays
    at WARNING either way.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Optional path to a log file

    Returns:
        Logger instance
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=handlers,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger(__name__)
