"""Logging utilities for Plotweave."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class GenerationStats:
    """Statistics from one or more generator calls."""

    generated_count: int = 0
    error_count: int = 0
    path_count: int = 0
    point_count: int = 0
    helper_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate generation duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


_installed_handlers: list[logging.Handler] = []


def _level(name: str, fallback: int = logging.WARNING) -> int:
    """Numeric level for a name such as "info"; unknown names map to ``fallback``."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else fallback


def _reset_handlers(root_logger: logging.Logger) -> None:
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
    write_file: bool = True,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling this again replaces the handlers installed by the previous call.
    Console output goes to stderr so that JSON written to stdout stays clean.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors
        write_file: If False, skip the file handler entirely

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    _reset_handlers(root_logger)
    root_logger.setLevel(logging.DEBUG)

    if write_file:
        if log_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = Path(f"plotweave_{timestamp}.log")

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_level(file_level, logging.DEBUG))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else _level(console_level))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("plotweave")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class GenerationLogger:
    """Logger for tracking generator calls and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger("plotweave")
        self._stats = GenerationStats()

    def log_start(self, algorithm_id: str, seed: int) -> None:
        """Log start of a generator call."""
        self._logger.debug("Generating", algorithm=algorithm_id, seed=seed)

    def log_complete(
        self,
        algorithm_id: str,
        path_count: int,
        point_count: int,
        helper_count: int,
        duration_ms: float,
    ) -> None:
        """Log a successful generator call."""
        self._logger.info(
            "Generation complete",
            algorithm=algorithm_id,
            paths=path_count,
            points=point_count,
            helpers=helper_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.generated_count += 1
        self._stats.path_count += path_count
        self._stats.point_count += point_count
        self._stats.helper_count += helper_count

    def log_error(self, algorithm_id: str, error: Exception) -> None:
        """Log a failed generator call."""
        self._logger.error(
            "Generation failed",
            algorithm=algorithm_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.error_count += 1
        self._stats.errors.append((algorithm_id, str(error)))

    def log_post_process(self, algorithm_id: str, smoothing: float, simplify: float) -> None:
        self._logger.debug(
            "Post-processing",
            algorithm=algorithm_id,
            smoothing=smoothing,
            simplify=simplify,
        )

    @property
    def stats(self) -> GenerationStats:
        """Get current generation statistics."""
        return self._stats
