"""Yokogawa WT3000 emulator.

Provides an in-process emulator implementing the ``ByteTransport`` protocol.
It understands the command set in :mod:`wtlink_yokogawa.vocabulary` in long
or short form, keeps the same settings the driver tracks, and serves replies
in chunks no larger than the receive capacity, flagging truncation the way a
USB bulk read does.
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from typing import Callable, Sequence

from wtlink_scpi.response import RESPONSE_TERMINATOR
from wtlink_scpi.transport import ReceiveResult

from wtlink_yokogawa.state import ConfigurationState
from wtlink_yokogawa.vocabulary import Group, Header, NumericFormat, Transition, short_form

# ---------------------------------------------------------------------------
# Mnemonic normalization
# ---------------------------------------------------------------------------

def _build_mnemonic_tables() -> tuple[dict[str, str], dict[str, str]]:
    """Map long and short spellings to short form, and short form to long."""
    to_short: dict[str, str] = {}
    to_long: dict[str, str] = {}
    for member in (*Group, *Header):
        if not member.value.startswith(":"):
            continue
        short = short_form(member.value)
        long = member.value[1:].upper()
        to_short[short] = short
        to_short[long] = short
        to_long[short] = long
    return to_short, to_long


_TO_SHORT, _TO_LONG = _build_mnemonic_tables()

_SEGMENT_RE = re.compile(r"^([A-Z]+)(\d*)$")


def _normalize_header(header: str) -> tuple[str, int | None]:
    """Normalize a program header to short form and split off its suffix.

    ``":COMMunicate:REMote"`` becomes ``("COMM:REM", None)`` and
    ``":INPUT:MODULE2"`` becomes ``("INP:MODU", 2)``.
    """
    upper = header.upper().lstrip(":")
    segments: list[str] = []
    suffix: int | None = None
    for segment in upper.split(":"):
        match = _SEGMENT_RE.match(segment)
        if match is None:
            return upper, None
        name, digits = match.groups()
        segments.append(_TO_SHORT.get(name, name))
        if digits:
            suffix = int(digits)
    return ":".join(segments), suffix


def _response_header(key: str, suffix: int | None, verbose: bool) -> str:
    names = [_TO_LONG.get(s, s) if verbose else s for s in key.split(":")]
    text = ":" + ":".join(names)
    return text if suffix is None else f"{text}{suffix}"


def _format_ascii(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "-INF" if value < 0 else "INF"
    return f"{value:.5E}"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Wt3000EmulatorConfig:
    """Configuration for a WT3000 emulator instance.

    Args:
        identity: ``*IDN?`` response string.
        modules: Module type reported by ``:INPut:MODUle<n>?`` for each
            installed input element, element 1 first.
    """

    identity: str
    modules: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.identity:
            raise ValueError("identity must be non-empty")
        if not self.modules:
            raise ValueError("modules must list at least one input element")


# ---------------------------------------------------------------------------
# Emulator
# ---------------------------------------------------------------------------


class Wt3000Emulator:
    """In-process WT3000 emulator implementing ``ByteTransport``.

    Args:
        config: Emulator configuration specifying identity and elements.
    """

    def __init__(self, config: Wt3000EmulatorConfig) -> None:
        self._config = config
        self._settings = ConfigurationState()
        self._numeric_values: tuple[float, ...] = ()
        self._pending = b""
        self._error_queue: list[tuple[int, str]] = []
        self._received: list[str] = []
        self._fail_sends = 0
        self._fail_receives = 0
        self._closed = False

        # Build dispatch tables
        self._set_handlers: dict[str, Callable[[int | None, str], None]] = {
            "COMM:HEAD": self._flag_setter("header"),
            "COMM:OVER": self._flag_setter("overlap"),
            "COMM:REM": self._flag_setter("remote"),
            "COMM:VERB": self._flag_setter("verbose"),
            "NUM:FORM": self._set_format,
            "STAT:EESE": self._set_eese,
            "STAT:FILT": self._set_filter,
        }

        self._query_handlers: dict[str, Callable[[int | None], bytes | None]] = {
            "COMM:HEAD": self._flag_getter("header"),
            "COMM:OVER": self._flag_getter("overlap"),
            "COMM:REM": self._flag_getter("remote"),
            "COMM:VERB": self._flag_getter("verbose"),
            "INP:MODU": self._get_module,
            "NUM:FORM": self._get_format,
            "NUM:VAL": self._get_values,
        }

    # -- Transport interface ------------------------------------------------

    def send(self, data: bytes) -> bool:
        """Process one command or query."""
        if self._fail_sends:
            self._fail_sends -= 1
            return False

        line = data.decode("ascii", errors="replace").strip()
        self._received.append(line)
        self._pending = b""
        if not line:
            return True

        is_query, header, args = self._parse_line(line)

        if not self._handle_common_command(header, is_query):
            self._dispatch(header, args, is_query)
        return True

    def receive(self, capacity: int) -> ReceiveResult:
        """Return up to *capacity* bytes of the pending reply.

        With no reply pending the read fails, as a real read would time out.
        """
        if self._fail_receives:
            self._fail_receives -= 1
            return ReceiveResult(success=False)
        if not self._pending:
            return ReceiveResult(success=False)
        chunk = self._pending[:capacity]
        self._pending = self._pending[capacity:]
        return ReceiveResult(success=True, data=chunk, truncated=bool(self._pending))

    def close(self) -> None:
        """Close the emulator (no-op for in-process transport)."""
        self._closed = True

    # -- Test helpers -------------------------------------------------------

    @property
    def settings(self) -> ConfigurationState:
        """Copy of the settings the emulated instrument has adopted."""
        return self._settings.copy()

    @property
    def received(self) -> list[str]:
        """Every command line received, oldest first."""
        return list(self._received)

    @property
    def error_queue(self) -> list[tuple[int, str]]:
        """Errors queued by rejected commands."""
        return list(self._error_queue)

    @property
    def is_closed(self) -> bool:
        """Whether :meth:`close` was called."""
        return self._closed

    def set_numeric_values(self, values: Sequence[float]) -> None:
        """Set the values returned by ``:NUMeric:VALue?``.

        Args:
            values: Measurement values in reply order.
        """
        self._numeric_values = tuple(float(v) for v in values)

    def fail_next_send(self, count: int = 1) -> None:
        """Make the next *count* sends report failure without processing."""
        self._fail_sends = count

    def fail_next_receive(self, count: int = 1) -> None:
        """Make the next *count* receives report failure."""
        self._fail_receives = count

    # -- Private helpers ----------------------------------------------------

    def _parse_line(self, line: str) -> tuple[bool, str, str]:
        """Parse a line into (is_query, header, args)."""
        is_query = "?" in line
        if is_query:
            qmark_idx = line.index("?")
            header = line[:qmark_idx]
            args = line[qmark_idx + 1 :].strip()
        else:
            parts = line.split(None, 1)
            header = parts[0]
            args = parts[1] if len(parts) > 1 else ""
        return is_query, header, args

    def _handle_common_command(self, header: str, is_query: bool) -> bool:
        """Handle IEEE 488.2 common commands. Returns True if handled."""
        upper_header = header.upper()
        if upper_header == Group.IDENTIFY.value and is_query:
            self._reply(self._config.identity.encode("ascii"))
            return True
        if upper_header == Group.CLEAR_STATUS.value and not is_query:
            self._error_queue.clear()
            return True
        return False

    def _dispatch(self, header: str, args: str, is_query: bool) -> None:
        key, suffix = _normalize_header(header)
        if is_query:
            query_handler = self._query_handlers.get(key)
            if query_handler is None:
                self._error_queue.append((-113, "Undefined header"))
                return
            payload = query_handler(suffix)
            if payload is None:
                return
            if self._settings.header:
                prefix = _response_header(key, suffix, self._settings.verbose)
                payload = prefix.encode("ascii") + b" " + payload
            self._reply(payload)
        else:
            set_handler = self._set_handlers.get(key)
            if set_handler is None:
                self._error_queue.append((-113, "Undefined header"))
                return
            set_handler(suffix, args)

    def _reply(self, payload: bytes) -> None:
        self._pending = payload + RESPONSE_TERMINATOR

    def _parameter_error(self) -> None:
        self._error_queue.append((-224, "Illegal parameter value"))

    def _element(self, suffix: int | None) -> int | None:
        element = 1 if suffix is None else suffix
        if element < 1 or element > len(self._config.modules):
            self._error_queue.append((-222, "Data out of range"))
            return None
        return element

    # -- Set handlers -------------------------------------------------------

    def _flag_setter(self, name: str) -> Callable[[int | None, str], None]:
        def handler(_suffix: int | None, args: str) -> None:
            token = args.strip().upper()
            if token in ("ON", "1"):
                setattr(self._settings, name, True)
            elif token in ("OFF", "0"):
                setattr(self._settings, name, False)
            else:
                self._parameter_error()

        return handler

    def _set_format(self, _suffix: int | None, args: str) -> None:
        numeric_format = NumericFormat.from_token(args)
        if numeric_format is None:
            self._parameter_error()
            return
        self._settings.numeric_format = numeric_format

    def _set_eese(self, _suffix: int | None, args: str) -> None:
        try:
            register = int(args.strip())
        except ValueError:
            self._parameter_error()
            return
        if register < 0 or register > 0xFFFF:
            self._parameter_error()
            return
        self._settings.extended_event_status_enable = register != 0

    def _set_filter(self, suffix: int | None, args: str) -> None:
        if suffix is None or suffix < 1 or suffix > 16:
            self._error_queue.append((-222, "Data out of range"))
            return
        try:
            transition = Transition(args.strip().upper())
        except ValueError:
            self._parameter_error()
            return
        self._settings.status_filter[str(suffix)] = transition

    # -- Query handlers -----------------------------------------------------

    def _flag_getter(self, name: str) -> Callable[[int | None], bytes | None]:
        def handler(_suffix: int | None) -> bytes | None:
            return b"1" if getattr(self._settings, name) else b"0"

        return handler

    def _get_module(self, suffix: int | None) -> bytes | None:
        element = self._element(suffix)
        if element is None:
            return None
        return self._config.modules[element - 1].encode("ascii")

    def _get_format(self, _suffix: int | None) -> bytes | None:
        numeric_format = self._settings.numeric_format or NumericFormat.ASCII
        if self._settings.verbose:
            return numeric_format.value.upper().encode("ascii")
        return short_form(numeric_format.value).encode("ascii")

    def _get_values(self, _suffix: int | None) -> bytes | None:
        if self._settings.numeric_format is NumericFormat.FLOAT:
            payload = struct.pack(f">{len(self._numeric_values)}f", *self._numeric_values)
            length = str(len(payload))
            return f"#{len(length)}{length}".encode("ascii") + payload
        return ",".join(_format_ascii(v) for v in self._numeric_values).encode("ascii")


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def make_wt3000_emulator(serial: str = "91K000001", elements: int = 4) -> Wt3000Emulator:
    """Create a WT3000 emulator.

    Args:
        serial: Serial number for the ``*IDN?`` response.
        elements: Number of installed input elements (1-4).

    Returns:
        Configured emulator instance with 30 A input elements.
    """
    if elements < 1 or elements > 4:
        raise ValueError("elements must be between 1 and 4")
    config = Wt3000EmulatorConfig(
        identity=f"YOKOGAWA,760301-{elements:02d}-SV,{serial},F1.01",
        modules=tuple("760902" for _ in range(elements)),
    )
    return Wt3000Emulator(config)
