import json
import logging
from logging.config import dictConfig

HTTP_LOGGER = "objstore.http"


def setup_logging(level: str = "INFO", *, http_level: str | None = None) -> None:
    """Install JSON logging on the root logger.

    ``http_level`` sets the per-request ``objstore.http`` logger on its own,
    so request lines can be muted while backend warnings stay visible.
    """
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {
                HTTP_LOGGER: {
                    "level": http_level or level,
                },
            },
        }
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; the record's ``extra`` dict is merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            payload.update(fields)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
