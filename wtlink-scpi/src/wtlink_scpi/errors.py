"""SCPI protocol error types.

This module defines exception classes for the failures that may occur while
building commands, exchanging bytes with an instrument, and decoding its
replies. All exceptions inherit from :class:`wtlink_core.errors.WtlinkError`.
"""

from __future__ import annotations

from wtlink_core.errors import WtlinkError


class ScpiError(WtlinkError):
    """Base exception for SCPI protocol errors.

    All SCPI-related exceptions inherit from this class, allowing callers
    to catch all SCPI errors with a single except clause.
    """


class TransportError(ScpiError):
    """Raised when sending or receiving fails at the byte layer."""


class TruncatedResponseError(ScpiError):
    """Raised when a reply did not fit in the receive buffer.

    The instrument had more data available than the caller allowed for, so
    the bytes received are an incomplete reply. Decoding them would silently
    drop trailing values.

    Attributes:
        received: Number of bytes actually received.
        capacity: Maximum number of bytes the caller allowed.
    """

    def __init__(self, received: int, capacity: int) -> None:
        """Initialize the truncation error.

        Args:
            received: Number of bytes actually received.
            capacity: Receive buffer capacity in bytes.
        """
        self.received = received
        self.capacity = capacity
        super().__init__(
            f"Response truncated: received {received} bytes into a {capacity}-byte buffer "
            f"and more data was available"
        )


class MalformedCommandError(ScpiError):
    """Raised when a command cannot be built from its parts.

    Example:
        A query that carries a value argument.
    """


class InvalidArgumentError(ScpiError):
    """Raised when a value is outside the instrument's fixed vocabulary.

    Example:
        A status filter condition other than RISE, FALL, BOTH or NEVER.
    """


class MalformedNumericResponseError(ScpiError):
    """Raised when a numeric reply cannot be decoded into floats."""
