"""Sampled logger for high-frequency log messages.

Provides utilities to reduce log spam by only logging at configurable intervals.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


def make_sampled_logger(
    log_format: str,
    log_interval: int = 1000,
    target_logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> Callable[..., None]:
    """Create a sampled logger that only logs the first and every Nth event.

    Every call to the returned function counts as one event. The event number
    is passed to the log call as the first format argument.

    Args:
        log_format: Format string for the log message. First placeholder receives
                    the event number, remaining placeholders receive format_args.
        log_interval: Log every Nth event (default 1000)
        target_logger: Logger instance to use (default: module logger)
        level: Log level to use (default: DEBUG)

    Returns:
        A function: (*format_args) -> None

    Raises:
        ValueError: if log_interval is smaller than 1.
    """
    if log_interval < 1:
        raise ValueError(f"log_interval must be >= 1, got {log_interval}")

    event_counter = 0
    _logger = target_logger or logger

    def log_sampled(*format_args: object) -> None:
        nonlocal event_counter

        event_counter += 1
        if event_counter == 1 or event_counter % log_interval == 0:
            _logger.log(level, log_format, event_counter, *format_args)

    return log_sampled
