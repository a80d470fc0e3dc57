import asyncio
import logging
import sys
from pathlib import Path

_MARKS = [
    (logging.CRITICAL, "💥 "),
    (logging.ERROR, "🔥 "),
    (logging.WARNING, "⚠️ "),
    (logging.INFO, "  "),
    (logging.NOTSET, "🕸  "),
]


def _short_name(record: logging.LogRecord) -> str:
    return record.name.removeprefix("emojifetch.")


class _ConsoleFormatter(logging.Formatter):
    """Terse stderr lines: a level mark, the module, then the message.

    Leading and trailing whitespace of the message stays outside the mark,
    so indented summary blocks line up under the progress lines.
    """

    def format(self, record):
        m = record.getMessage()
        ml = m.lstrip()
        out = ml.rstrip()
        pre, post = m[: len(m) - len(ml)], ml[len(out) :]
        if record.name != "root":
            out = f"{_short_name(record)}: {out}"
        mark = next(mark for level, mark in _MARKS if record.levelno >= level)
        out = f"{mark}{out}"
        for extra in (self._exc_text(record), record.stack_info):
            if extra:
                out = f"{out.strip()}\n{extra}"
        return pre + out.strip() + post

    def _exc_text(self, record):
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        return record.exc_text


class _RunLogFormatter(logging.Formatter):
    """Timestamped, mark-free lines for a run log kept beside the failure list."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(short)s: %(message)s")

    def format(self, record):
        record.short = _short_name(record)
        return super().format(record)


def _sys_exception_hook(exc_type, exc_value, exc_tb):
    if issubclass(exc_type, KeyboardInterrupt):
        logging.critical("*** KeyboardInterrupt (^C)! ***")
    else:
        exc_info = (exc_type, exc_value, exc_tb)
        logging.critical("Uncaught exception", exc_info=exc_info)


def _asyncio_exception_hook(loop, context):
    exc = context.get("exception")
    if isinstance(exc, KeyboardInterrupt):
        logging.critical("*** KeyboardInterrupt (^C)! ***")
    elif exc:
        logging.critical(context["message"], exc_info=(type(exc), exc, None))
    else:
        logging.critical(context["message"])


def install_loop_hook():
    """Route unhandled errors in the running event loop to logging."""
    asyncio.get_running_loop().set_exception_handler(_asyncio_exception_hook)


def enable_debug():
    logging.getLogger().setLevel(logging.DEBUG)
    logging.getLogger("asyncio").setLevel(logging.INFO)
    logging.getLogger("aiohttp").setLevel(logging.INFO)


def log_to_file(path: Path) -> logging.Handler:
    """Also append every record at the root's level to a run log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(_RunLogFormatter())
    logging.getLogger().addHandler(handler)
    return handler


# Initialize on import.
_log_handler = logging.StreamHandler(stream=sys.stderr)
_log_handler.setFormatter(_ConsoleFormatter())
logging.basicConfig(level=logging.INFO, handlers=[_log_handler])
sys.excepthook = _sys_exception_hook
