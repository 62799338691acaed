"""Core types for the wtlink power analyzer packages.

This package holds the pieces shared by every wtlink package:

- The root exception class :class:`WtlinkError`
- :class:`InstrumentIdentity`, the parsed ``*IDN?`` record
- :class:`ConnectionState`, the driver session lifecycle
"""

from wtlink_core.errors import WtlinkError
from wtlink_core.types import ConnectionState, InstrumentIdentity

__all__ = [
    # Errors
    "WtlinkError",
    # Types
    "ConnectionState",
    "InstrumentIdentity",
]
