"""Yokogawa WT3000 command vocabulary.

The WT3000 accepts the GPIB/SCPI-style commands listed here over its USB
interface. Mnemonics are written in the instrument manual's mixed case: the
upper-case letters form the short form the instrument also accepts
(``:COMMunicate`` may be sent as ``:COMM``).
"""

from __future__ import annotations

from enum import Enum

from wtlink_scpi.errors import InvalidArgumentError
from wtlink_scpi.number import BoolStyle

# -- USB identification ------------------------------------------------------

USB_VENDOR_ID = 0x0B21
"""Yokogawa USB vendor ID."""

USB_PRODUCT_ID = 0x0025
"""WT3000 USB product ID."""

ENDPOINT_TRANSMIT = 0x01
"""Bulk OUT endpoint (host to device)."""

ENDPOINT_RECEIVE = 0x83
"""Bulk IN endpoint (device to host)."""


def usb_resource_string(serial: str, *, board: int = 0) -> str:
    """Build the VISA resource string for a WT3000 on USB.

    The ``RAW`` resource class talks to the bulk endpoints directly and is
    served by the pyvisa-py backend.

    Args:
        serial: Instrument serial number as reported by USB.
        board: USB board index.

    Returns:
        A resource string such as ``USB0::0x0B21::0x0025::91K000001::RAW``.
    """
    return f"USB{board}::0x{USB_VENDOR_ID:04X}::0x{USB_PRODUCT_ID:04X}::{serial}::RAW"


# -- Mnemonics ----------------------------------------------------------------


class Group(Enum):
    """Root command nodes, including IEEE 488.2 common commands."""

    CLEAR_STATUS = "*CLS"
    IDENTIFY = "*IDN"
    COMMUNICATE = ":COMMunicate"
    INPUT = ":INPut"
    NUMERIC = ":NUMeric"
    STATUS = ":STATus"


class Header(Enum):
    """Sub-nodes appended to a :class:`Group`."""

    # :COMMunicate
    HEADER = ":HEADer"
    OVERLAP = ":OVERlap"
    REMOTE = ":REMote"
    VERBOSE = ":VERBose"
    # :INPut
    MODULE = ":MODUle"
    VOLTAGE = ":VOLTage"
    CURRENT = ":CURRent"
    # :NUMeric
    FORMAT = ":FORMat"
    VALUE = ":VALue"
    # :STATus
    EXTENDED_EVENT_STATUS_ENABLE = ":EESE"
    FILTER = ":FILTer"


BOOLEAN_STYLES: dict[Header, BoolStyle] = {
    Header.HEADER: BoolStyle.SWITCH,
    Header.OVERLAP: BoolStyle.SWITCH,
    Header.REMOTE: BoolStyle.SWITCH,
    Header.VERBOSE: BoolStyle.SWITCH,
    Header.EXTENDED_EVENT_STATUS_ENABLE: BoolStyle.NUMERIC,
}
"""Boolean token style the instrument expects for each boolean header."""


def short_form(mnemonic: str) -> str:
    """Return the short form of a mixed-case mnemonic (``:NUMeric`` -> ``NUM``)."""
    return "".join(c for c in mnemonic.lstrip(":*") if c.isupper())


# -- Arguments ----------------------------------------------------------------


class NumericFormat(Enum):
    """Wire format of ``:NUMeric:VALue?`` replies."""

    ASCII = "ASCii"
    FLOAT = "FLOat"

    @classmethod
    def from_token(cls, text: str) -> NumericFormat | None:
        """Match a long or short token, case-insensitively.

        Args:
            text: Token such as ``"FLOat"``, ``"FLOAT"`` or ``"flo"``.

        Returns:
            The matching format, or None if *text* is not a known token.
        """
        token = text.strip().upper()
        for member in cls:
            if token in (member.value.upper(), short_form(member.value)):
                return member
        return None


class Transition(Enum):
    """Transition condition latched by a status filter."""

    RISE = "RISE"
    FALL = "FALL"
    BOTH = "BOTH"
    NEVER = "NEVER"

    @classmethod
    def parse(cls, condition: Transition | str) -> Transition:
        """Validate a transition condition.

        Args:
            condition: A member, or its name in any case (``"Rise"``).

        Returns:
            The matching member.

        Raises:
            InvalidArgumentError: If *condition* is not one of RISE, FALL,
                BOTH or NEVER.
        """
        if isinstance(condition, cls):
            return condition
        if isinstance(condition, str):
            try:
                return cls(condition.strip().upper())
            except ValueError:
                pass
        raise InvalidArgumentError(
            f"Invalid status filter condition {condition!r}; "
            f"expected one of {', '.join(m.value for m in cls)}"
        )


def node_number(number: int | str, what: str) -> int:
    """Validate a numeric node suffix such as an element or filter number.

    Args:
        number: Positive integer, or a string of decimal digits.
        what: Description used in the error message.

    Returns:
        The number as an int.

    Raises:
        InvalidArgumentError: If *number* is not a positive integer.
    """
    if isinstance(number, bool):
        raise InvalidArgumentError(f"Invalid {what} {number!r}")
    if isinstance(number, str):
        text = number.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidArgumentError(f"Invalid {what} {number!r}")
        number = int(text)
    if not isinstance(number, int) or number < 1:
        raise InvalidArgumentError(f"Invalid {what} {number!r}")
    return number
