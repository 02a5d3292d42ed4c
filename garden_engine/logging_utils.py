"""Throttled diagnostics for records that repeatedly fail to resolve."""

from __future__ import annotations

import logging
import time

_LAST: dict[str, float] = {}
_MAX_CODES = 1024


def warn_once(
    logger: logging.Logger,
    code: str,
    message: str,
    window: int = 60,
    level: int = logging.WARNING,
) -> bool:
    """Log ``message`` at most once per ``window`` seconds for ``code``.

    Returns ``True`` when the message was emitted. The cache is capped and the
    oldest codes are discarded first.
    """
    now = time.monotonic()
    last = _LAST.get(code)
    if last is not None and now - last <= window:
        return False
    if len(_LAST) >= _MAX_CODES:
        oldest = min(_LAST, key=_LAST.get)
        _LAST.pop(oldest, None)
    _LAST[code] = now
    logger.log(level, "%s: %s", code, message)
    return True


def reset_warnings() -> None:
    """Forget every throttled code."""
    _LAST.clear()
