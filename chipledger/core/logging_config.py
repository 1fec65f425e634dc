"""Logging configuration for the chipledger settlement engine."""

from pathlib import Path
import sys

from loguru import logger

from chipledger.core.config import LOG_LEVEL, LOG_TO_FILE, LOGS_DIR


def configure_logging(
    level: str = LOG_LEVEL,
    logs_dir: str | Path = LOGS_DIR,
    *,
    to_file: bool = LOG_TO_FILE,
) -> None:
    """Configure loguru logger with console output and optional rotating files."""
    # Remove default handler (console only)
    logger.remove()

    # Add console handler with colorization
    logger.add(
        sink=sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if not to_file:
        logger.info("Logging configured: console output only")
        return

    # Create logs directory if it doesn't exist
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    # Add file handler with rotation
    logger.add(
        sink=logs_path / "chipledger_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level=level,
        rotation="00:00",  # Rotate at midnight
        retention="30 days",
        compression="zip",
        enqueue=True,  # Thread-safe logging
    )

    # Add error-only file handler
    logger.add(
        sink=logs_path / "chipledger_errors_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="00:00",
        retention="90 days",  # Keep error logs longer
        compression="zip",
        enqueue=True,
    )

    logger.info("Logging configured: console + file output enabled")
