import logging
from typing import Any

LOG_EXTRA_FIELDS = (
    "codec",
    "uri",
    "pretty",
    "status",
    "duration_ms",
    "error_type",
)


class LogfmtFormatter(logging.Formatter):
    """Render codec events as `key=value` pairs; absent fields are skipped."""

    def format(self, record: logging.LogRecord) -> str:
        pairs: list[tuple[str, Any]] = [
            ("level", record.levelname.lower()),
            ("logger", record.name),
            ("event", record.getMessage() or None),
        ]
        pairs.extend((key, getattr(record, key, None)) for key in LOG_EXTRA_FIELDS)
        if record.exc_info:
            pairs.append(("exc_type", record.exc_info[0].__name__))

        return " ".join(
            f"{key}={self._quote(value)}" for key, value in pairs if value is not None
        )

    @staticmethod
    def _quote(value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        text = str(value)
        if isinstance(value, (int, float)):
            return text
        if any(ch in text for ch in ' ="'):
            return '"' + text.replace('"', '\\"') + '"'
        return text


def setup_logging(level: str = "INFO") -> None:
    """Route all records through one logfmt handler on the root logger."""

    root = logging.getLogger()
    # one handler, however often this is called
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS"]
