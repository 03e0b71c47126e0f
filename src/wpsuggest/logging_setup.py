"""Console (and optional file) logging for the API and scripts."""

import logging
import logging.config
from pathlib import Path


def _resolve_log_level(raw_level: str | None) -> tuple[int, bool]:
    """Return (level, invalid_flag)."""
    name = (raw_level or "").strip().upper() or "INFO"
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level, False
    return logging.INFO, True


def configure_logging(raw_level: str | None = "INFO", log_path: str | Path | None = None) -> None:
    level, invalid_level = _resolve_log_level(raw_level)

    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        }
    }
    root_handlers = ["console"]

    file_error: str | None = None
    if log_path:
        log_path = Path(log_path)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers["file"] = {
                "class": "logging.FileHandler",
                "filename": str(log_path),
                "mode": "a",
                "encoding": "utf-8",
                "formatter": "default",
            }
            root_handlers.append("file")
        except OSError as exc:
            file_error = str(exc)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
            },
            "handlers": handlers,
            "root": {"level": level, "handlers": root_handlers},
            # httpx logs every request at INFO
            "loggers": {"httpx": {"level": "WARNING"}},
        }
    )

    if invalid_level:
        logging.getLogger(__name__).warning("Invalid log level '%s'; defaulting to INFO.", raw_level)
    if file_error:
        logging.getLogger(__name__).warning("Failed to initialize log file '%s': %s", log_path, file_error)
