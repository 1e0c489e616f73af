from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 3


class EventFormatter(logging.Formatter):
    """One JSON object per line.

    Structured context passed as ``extra={"fields": {...}}`` is merged into the
    line, so area logs can be filtered without parsing the message text.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "area": record.name,
            "event": record.getMessage(),
            "at": f"{record.module}:{record.lineno}",
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            for name, value in fields.items():
                line.setdefault(name, value)
        if record.exc_info:
            line["traceback"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def _rotating_file(path: Path, min_level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(EventFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    handler.setLevel(min_level)
    return handler


def setup_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    root.addHandler(_rotating_file(logs_dir / "app.log", logging.INFO))
    root.addHandler(_rotating_file(logs_dir / "errors.log", logging.ERROR))

    # sales and stock writes share one audit-style file
    sales_handler = _rotating_file(logs_dir / "sales.log", logging.INFO)
    for name in ("stockbook.sales", "stockbook.stock"):
        logging.getLogger(name).addHandler(sales_handler)
        logging.getLogger(name).setLevel(logging.INFO)

    quality_handler = _rotating_file(logs_dir / "quality.log", logging.WARNING)
    logging.getLogger("stockbook.quality").addHandler(quality_handler)
    logging.getLogger("stockbook.quality").setLevel(logging.WARNING)
