"""Domain service that derives object keys from upload time and display name."""

from __future__ import annotations

import re
import time
from collections.abc import Callable

from domain.exceptions import ValidationError

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")
_DOT_RUNS = re.compile(r"\.{2,}")
_FALLBACK_NAME = "file"


def sanitize_display_name(display_name: str) -> str:
    """Reduce a client-supplied name to a single safe storage path component.

    Path separators, whitespace and other characters outside word characters,
    ``.`` and ``-`` collapse to ``_``, runs of dots to a single dot. Leading dots
    are dropped so the result can never be ``.`` or ``..``.
    """
    cleaned = _UNSAFE_CHARS.sub("_", display_name.strip())
    cleaned = _DOT_RUNS.sub(".", cleaned).lstrip(".")
    return cleaned or _FALLBACK_NAME


class KeyAllocator:
    """Allocate object identifiers as ``<timestamp>_<sanitized name>``.

    The timestamp is microseconds since the epoch. Uniqueness is probabilistic:
    two calls in the same microsecond with the same name yield the same key, and
    the later write silently replaces the earlier record.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns) -> None:
        self._clock_ns = clock_ns

    def allocate(self, display_name: str) -> str:
        if not display_name or not display_name.strip():
            msg = "Display name cannot be blank or empty"
            raise ValidationError(msg)

        timestamp_us = self._clock_ns() // 1_000
        return f"{timestamp_us}_{sanitize_display_name(display_name)}"
