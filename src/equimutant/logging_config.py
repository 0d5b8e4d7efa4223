"""
Logging setup for equimutant.

Two loguru sinks:
- stderr, human readable, off in machine mode (EQUIMUTANT_MACHINE_MODE=1)
- .equimutant/logs/equimutant.log, opt-in (EQUIMUTANT_FILE_LOGGING=1)

EQUIMUTANT_LOG_LEVEL overrides the console level.
"""

import os
import sys
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"

_configured = False


def env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _add_file_sink() -> None:
    from equimutant.paths import get_paths
    paths = get_paths()
    paths.ensure_dirs()

    # Worker threads log concurrently; enqueue keeps the file writes ordered
    logger.add(
        paths.logs_dir / "equimutant.log",
        level="DEBUG",
        format=FILE_FORMAT,
        rotation="5 MB",
        retention=3,
        enqueue=True,
        catch=True,
    )


def setup_logging(level=None, suppress_console=None, enable_file_logging=None):
    """
    Configure the global logger once per process.

    Args:
        level: Console level; defaults to EQUIMUTANT_LOG_LEVEL or INFO
        suppress_console: No stderr sink; None reads EQUIMUTANT_MACHINE_MODE
        enable_file_logging: Add the rotating file sink; None reads EQUIMUTANT_FILE_LOGGING
    """
    global _configured
    if _configured:
        return
    _configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = env_flag("EQUIMUTANT_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = env_flag("EQUIMUTANT_FILE_LOGGING")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level or os.getenv("EQUIMUTANT_LOG_LEVEL", "INFO").upper(),
            format=CONSOLE_FORMAT,
            colorize=True,
        )

    if enable_file_logging:
        _add_file_sink()


def reset_logging():
    """Let the next setup_logging() call reconfigure the sinks (CLI flags, tests)."""
    global _configured
    _configured = False


setup_logging()
