"""Value types shared by the wtlink packages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class InstrumentIdentity:
    """Fields of an ``*IDN?`` reply.

    Attributes:
        manufacturer: Maker name, ``"YOKOGAWA"`` for a WT3000.
        model: Model code including options, e.g. ``"760301-04-SV"``.
        serial: Instrument serial number.
        firmware: Firmware revision, e.g. ``"F1.01"``.
    """

    manufacturer: str
    model: str
    serial: str
    firmware: str


class ConnectionState(Enum):
    """How far a driver session has progressed.

    Drivers record the state for diagnostics and never refuse a call because
    of it.
    """

    DISCONNECTED = "disconnected"
    """Not prepared yet, or closed."""

    CONNECTED = "connected"
    """Status cleared and remote control armed."""

    CONFIGURED = "configured"
    """Reply formatting applied."""
