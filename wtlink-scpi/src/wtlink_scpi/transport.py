"""Byte transport protocol definition.

This module defines the :class:`ByteTransport` protocol, which specifies the
interface that all transport implementations must provide. Transports handle
the physical layer communication with instruments: they move opaque byte
blocks and know nothing about the command grammar.

Implementations include:
- :class:`wtlink_scpi.VisaByteTransport`: PyVISA-backed transport for real hardware
- :class:`wtlink_yokogawa.Wt3000Emulator`: in-process WT3000 emulator
"""

# pylint: disable=unnecessary-ellipsis  # Ellipsis required for Protocol method stubs

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ReceiveResult:
    """Outcome of a bounded receive.

    Attributes:
        success: False if the transfer failed at the byte layer.
        data: Bytes received. Data longer than the requested capacity means
            the reply did not fit, whatever *truncated* says.
        truncated: True if the device had more data than the capacity allowed.
    """

    success: bool
    data: bytes = b""
    truncated: bool = False


class ByteTransport(Protocol):
    """Protocol for byte-oriented instrument transport.

    Callers are responsible for opening the transport before passing it to a
    driver. Both operations are synchronous and report failure through their
    return values rather than by raising; timeout policy belongs to the
    implementation.

    Example:
        >>> class MyTransport:
        ...     def send(self, data: bytes) -> bool:
        ...         return True
        ...     def receive(self, capacity: int) -> ReceiveResult:
        ...         return ReceiveResult(success=True, data=b"1.0\\n")
        ...     def close(self) -> None:
        ...         pass
        ...
        >>> transport: ByteTransport = MyTransport()  # Type checks OK
    """

    def send(self, data: bytes) -> bool:
        """Send a block of bytes to the instrument.

        Args:
            data: The encoded command. The transport appends any write
                termination it requires.

        Returns:
            True if the whole block was transferred.
        """
        ...

    def receive(self, capacity: int) -> ReceiveResult:
        """Receive at most *capacity* bytes from the instrument.

        Args:
            capacity: Maximum number of bytes to return.

        Returns:
            The received bytes with success and truncation flags.
        """
        ...

    def close(self) -> None:
        """Close the transport and release resources."""
        ...
