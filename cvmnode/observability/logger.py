"""Loguru-style logger backed by stdlib logging + rich.

Usage::

    from cvmnode.observability.logger import logger

    log = logger.bind(component="resolver")
    log.debug("Resolved {n} addresses for {node}", n=2, node="10.0.0.5")

Records are emitted under the ``cvmnode`` logger hierarchy, named after
the calling module, and do not propagate to the root logger. Nothing is printed until a sink is added
with ``logger.add``.
"""

from __future__ import annotations

import inspect
import logging
import logging.handlers
import os
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_root = logging.getLogger("cvmnode")


def _caller_logger(frame: inspect.FrameInfo) -> logging.Logger:
    module = frame.frame.f_globals.get("__name__", "cvmnode")
    if module != "cvmnode" and not module.startswith("cvmnode."):
        module = f"cvmnode.{module}"
    return logging.getLogger(module)


def _format_message(msg: str, args: tuple[object, ...], kwargs: dict[str, object]) -> str:
    if kwargs:
        return msg.format(**kwargs)
    if args:
        return msg.format(*args)
    return msg


class BoundLogger:
    __slots__ = ("_extras",)

    def __init__(self, extras: dict[str, object] | None = None) -> None:
        self._extras = extras or {}

    def bind(self, **kwargs: object) -> BoundLogger:
        return BoundLogger({**self._extras, **kwargs})

    def _log(self, level: int, message: str, /, *args: object, **kwargs: object) -> None:
        exc_info = kwargs.pop("exc_info", False)
        frame = inspect.stack()[2]
        lib_logger = _caller_logger(frame)
        if not lib_logger.isEnabledFor(level):
            return
        record = lib_logger.makeRecord(
            name=lib_logger.name,
            level=level,
            fn=frame.filename,
            lno=frame.lineno,
            msg=_format_message(message, args, kwargs),
            args=(),
            exc_info=sys.exc_info() if exc_info else None,
            func=frame.function,
        )
        record.filename = os.path.basename(frame.filename)
        for k, v in self._extras.items():
            setattr(record, k, v)
        record.extras = self._extras  # type: ignore[attr-defined]
        lib_logger.handle(record)

    def trace(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._log(TRACE, message, *args, **kwargs)

    def debug(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, /, *args: object, **kwargs: object) -> None:
        kwargs["exc_info"] = True
        self._log(logging.ERROR, message, *args, **kwargs)


def _make_file_handler(path: str, level: int, max_bytes: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(levelname)-8s | "
        "%(name)s:%(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    return handler


def _make_console_handler(stream: TextIO, level: int) -> logging.Handler:
    handler = RichHandler(
        level=level,
        console=Console(file=stream),
        show_time=True,
        show_level=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    return handler


class LoguruCompat:
    def __init__(self) -> None:
        self._bound = BoundLogger()
        self._handlers: dict[int, logging.Handler] = {}
        self._counter = 0

    def bind(self, **kwargs: object) -> BoundLogger:
        return self._bound.bind(**kwargs)

    def debug(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._bound.debug(message, *args, **kwargs)

    def info(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._bound.info(message, *args, **kwargs)

    def warning(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._bound.warning(message, *args, **kwargs)

    def error(self, message: str, /, *args: object, **kwargs: object) -> None:
        self._bound.error(message, *args, **kwargs)

    def add(
        self,
        sink: str | TextIO,
        *,
        level: str = "DEBUG",
        max_bytes: int = 50 * 1024 * 1024,
        backups: int = 10,
    ) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if numeric_level is None:
            numeric_level = TRACE if level.upper() == "TRACE" else logging.DEBUG

        match sink:
            case str() as path:
                handler = _make_file_handler(path, numeric_level, max_bytes, backups)
            case _:
                handler = _make_console_handler(sink, numeric_level)

        _root.addHandler(handler)
        self._counter += 1
        self._handlers[self._counter] = handler
        return self._counter

    def remove(self, handler_id: int | None = None) -> None:
        if handler_id is None:
            for h in list(self._handlers.values()):
                _root.removeHandler(h)
                h.close()
            self._handlers.clear()
            return
        if h := self._handlers.pop(handler_id, None):
            _root.removeHandler(h)
            h.close()

    def enable(self, name: str) -> None:
        target = logging.getLogger(name)
        target.disabled = False
        target.setLevel(TRACE)

    def disable(self, name: str) -> None:
        logging.getLogger(name).disabled = True


logger = LoguruCompat()

_root.setLevel(TRACE)
_root.propagate = False
