"""SCPI numeric fields and boolean argument tokens.

Instrument replies use the IEEE 488.2 decimal forms NR1 (``42``), NR2
(``1.25``) and NR3 (``2.301E+02``). Overflowed or missing measurements are
reported with the keywords ``NAN``, ``INF`` and ``NINF``; some firmware
writes ``-INF`` or ``+INF`` instead.
"""

from __future__ import annotations

import re
from enum import Enum

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:E[+-]?\d+)?")

_KEYWORD_VALUES: dict[str, float] = {
    "NAN": float("nan"),
    "INF": float("inf"),
    "+INF": float("inf"),
    "NINF": float("-inf"),
    "-INF": float("-inf"),
}

FIELD_SEPARATOR = ","


def parse_number(text: str) -> float:
    """Parse one numeric field of a reply.

    Only the decimal forms and keywords an instrument sends are accepted;
    Python-only spellings such as ``"infinity"`` or ``"1_000"`` are not.

    Args:
        text: The field. Surrounding whitespace and letter case are ignored.

    Returns:
        The value.

    Raises:
        ValueError: If *text* is not an NR1/NR2/NR3 number or keyword.
    """
    token = text.strip().upper()
    if token in _KEYWORD_VALUES:
        return _KEYWORD_VALUES[token]
    if _DECIMAL_RE.fullmatch(token) is None:
        raise ValueError(f"Invalid SCPI number: {text!r}")
    return float(token)


def parse_numbers(text: str) -> tuple[float, ...]:
    """Parse a comma-separated reply, keeping field order and duplicates."""
    return tuple(parse_number(field) for field in text.split(FIELD_SEPARATOR))


class BoolStyle(Enum):
    """Token pair an instrument expects for a boolean argument.

    Each member's value is the ``(true_token, false_token)`` pair.
    """

    NUMERIC = ("1", "0")
    SWITCH = ("ON", "OFF")


def format_bool(value: bool, style: BoolStyle = BoolStyle.NUMERIC) -> str:
    """Render *value* with the tokens of *style* (``1``/``0`` by default)."""
    on, off = style.value
    return on if value else off
