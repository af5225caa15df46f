"""Attach the wizard session, draft and step to every log record.

``configure_logging`` installs a record factory, so records created by any
logger (including third-party ones) carry ``session_id``, ``draft_id`` and
``wizard_step`` attributes that the default format can reference.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Final, Iterator

UNBOUND: Final[str] = "-"

LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s [session=%(session_id)s draft=%(draft_id)s "
    "step=%(wizard_step)s] %(name)s: %(message)s"
)

_FIELDS: Final[dict[str, contextvars.ContextVar[str]]] = {
    name: contextvars.ContextVar(name, default=UNBOUND) for name in ("session_id", "draft_id", "wizard_step")
}
_base_factory = logging.getLogRecordFactory()
_factory_installed = False


def _as_label(value: object | None) -> str:
    text = "" if value is None else str(value).strip()
    return text or UNBOUND


def _context_record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _base_factory(*args, **kwargs)
    for name, var in _FIELDS.items():
        setattr(record, name, var.get())
    return record


def configure_logging(*, level: int = logging.INFO) -> None:
    """Configure the root logger once and install the context record factory.

    Calling it again is harmless; an existing handler setup is kept and only
    given the context-aware format when it has none.
    """

    global _factory_installed
    if not _factory_installed:
        logging.setLogRecordFactory(_context_record_factory)
        _factory_installed = True

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return
    for handler in root.handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))


def _bind(name: str, value: object | None) -> None:
    _FIELDS[name].set(_as_label(value))


def set_session_id(session_id: str | None) -> None:
    configure_logging()
    _bind("session_id", session_id)


def set_draft_id(draft_id: str | None) -> None:
    _bind("draft_id", draft_id)


def set_wizard_step(step: str | None) -> None:
    _bind("wizard_step", step)


def current_context() -> dict[str, str]:
    return {name: var.get() for name, var in _FIELDS.items()}


@contextmanager
def log_context(**values: str | None) -> Iterator[None]:
    """Bind ``session_id``, ``draft_id`` or ``wizard_step`` for a block.

    Keywords left out (or passed as ``None``) keep their current value.
    """

    unknown = set(values) - set(_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log context field(s): {', '.join(sorted(unknown))}")
    tokens = [
        (_FIELDS[name], _FIELDS[name].set(_as_label(value)))
        for name, value in values.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "current_context",
    "log_context",
    "set_draft_id",
    "set_session_id",
    "set_wizard_step",
]
