import os
import sys

from loguru import logger

from config.settings import settings


def setup_logger(
    *,
    json_logs: bool | None = None,
    level: str | None = None,
    log_file: str | None = None,
) -> None:
    """Configure loguru for applications embedding the analytics.

    Arguments left as None come from ``config.settings``.
    Console level controlled by LOG_LEVEL env (default: ``level``).
    When ``log_file`` is set it always captures DEBUG, which includes the
    per-step lines the analytics emit.
    """
    if json_logs is None:
        json_logs = settings.json_logs
    if level is None:
        level = settings.log_level
    if log_file is None:
        log_file = settings.log_file or None

    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stdout,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_file:
        logger.add(
            log_file,
            rotation="50 MB",
            retention="3 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
