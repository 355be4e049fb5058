from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

# Attributes every LogRecord carries; only caller-supplied extras are copied.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

# Libraries that log every HTTP round trip of the page classifier.
_NOISY_LOGGERS = {
  "openai": logging.INFO,
  "httpx": logging.WARNING,
  "azure": logging.WARNING,
}


class JsonFormatter(logging.Formatter):
  """One JSON object per line; pages are classified on pool threads, so the thread is kept."""

  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    payload: dict[str, Any] = {
      "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
      "level": record.levelname,
      "logger": record.name,
      "thread": record.threadName,
      "message": record.getMessage(),
    }
    if record.exc_info:
      payload["exc_info"] = self.formatException(record.exc_info)
    for key, value in record.__dict__.items():
      if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
        continue
      if value is None or isinstance(value, (str, int, float, bool)):
        payload[key] = value
    return json.dumps(payload, ensure_ascii=False)


def _log_level() -> str:
  return os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(structured: bool = True, stream: Optional[TextIO] = None) -> None:
  """Route all records to one handler on stderr.

  stdout is reserved for the command's JSON result.
  """
  root = logging.getLogger()
  for handler in list(root.handlers):
    root.removeHandler(handler)

  root.setLevel(_log_level())
  handler = logging.StreamHandler(stream or sys.stderr)
  handler.setFormatter(JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT))
  root.addHandler(handler)

  for name, level in _NOISY_LOGGERS.items():
    logging.getLogger(name).setLevel(level)
