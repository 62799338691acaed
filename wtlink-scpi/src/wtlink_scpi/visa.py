"""PyVISA byte transport for SCPI instruments.

This module provides a VISA-based implementation of the
:class:`~wtlink_scpi.transport.ByteTransport` protocol. It wraps the PyVISA
library, which is lazily imported to allow the rest of wtlink-scpi to work
without VISA installed.

Reads go through the session's low-level ``visalib.read`` so the caller's
byte limit is honoured and a reply larger than the limit is reported as
truncated instead of being read to completion.

Supported resource string formats include:
- USB raw bulk: ``USB0::0x0B21::0x0025::91K000001::RAW`` (requires pyvisa-py)
- USBTMC: ``USB0::0x0957::0x0407::MY12345678::0::INSTR``
- TCPIP: ``TCPIP::192.168.1.100::INSTR``
- GPIB: ``GPIB0::1::INSTR``
"""

from __future__ import annotations

import logging
from typing import Any

from wtlink_scpi.errors import TransportError
from wtlink_scpi.transport import ReceiveResult

logger = logging.getLogger(__name__)


def _import_pyvisa() -> Any:
    try:
        import pyvisa  # type: ignore[import-not-found]  # pylint: disable=import-outside-toplevel
    except ImportError as exc:
        raise TransportError(
            "pyvisa library is not installed. Install with: pip install pyvisa"
        ) from exc
    return pyvisa


def _close_quietly(handle: Any, what: str) -> None:
    try:
        handle.close()
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Ignoring error while closing %s: %s", what, exc)


class VisaByteTransport:
    """Byte transport backed by PyVISA.

    The ``pyvisa`` library is imported lazily on :meth:`open`. I/O failures
    during :meth:`send` and :meth:`receive` are logged and reported through
    the return values; using the transport while it is closed raises
    :class:`TransportError`.

    Args:
        resource_string: VISA resource address.
        timeout_ms: I/O timeout in milliseconds, applied on open.
        write_termination: Bytes appended to every block sent.

    Example:
        >>> transport = VisaByteTransport("USB0::0x0B21::0x0025::91K000001::RAW")
        >>> transport.open()
        >>> transport.send(b"*IDN?")
        >>> print(transport.receive(256).data)
        >>> transport.close()
    """

    def __init__(
        self,
        resource_string: str,
        *,
        timeout_ms: int = 5000,
        write_termination: bytes = b"\n",
    ) -> None:
        self._resource_string = resource_string
        self._timeout_ms = timeout_ms
        self._write_termination = write_termination
        self._rm: Any = None
        self._resource: Any = None
        self._pyvisa: Any = None

    @property
    def resource_string(self) -> str:
        """The VISA resource string."""
        return self._resource_string

    @property
    def is_open(self) -> bool:
        """Whether the resource is currently open."""
        return self._resource is not None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> None:
        """Open the resource. Does nothing if it is already open.

        Raises:
            TransportError: If ``pyvisa`` is not installed or the resource
                cannot be opened.
        """
        if self._resource is not None:
            return

        pyvisa = _import_pyvisa()
        rm: Any = None
        try:
            rm = pyvisa.ResourceManager()
            resource = rm.open_resource(self._resource_string)
            resource.timeout = self._timeout_ms
        except Exception as exc:
            if rm is not None:
                _close_quietly(rm, "VISA resource manager")
            raise TransportError(
                f"Failed to open VISA resource {self._resource_string!r}: {exc}"
            ) from exc

        self._rm = rm
        self._resource = resource
        self._pyvisa = pyvisa
        logger.info("Opened VISA resource %s", self._resource_string)

    def close(self) -> None:
        """Close the resource and its resource manager. Safe to call repeatedly."""
        resource, rm = self._resource, self._rm
        self._resource = None
        self._rm = None
        if resource is not None:
            _close_quietly(resource, self._resource_string)
            logger.info("Closed VISA resource %s", self._resource_string)
        if rm is not None:
            _close_quietly(rm, "VISA resource manager")

    # -- Transport interface -------------------------------------------------

    def send(self, data: bytes) -> bool:
        """Send a block of bytes followed by the write termination.

        Args:
            data: The encoded command.

        Returns:
            True if the write completed, False on an I/O error.

        Raises:
            TransportError: If the resource is not open.
        """
        if self._resource is None:
            raise TransportError("VISA resource is not open")
        try:
            self._resource.write_raw(data + self._write_termination)
        except self._io_errors() as exc:
            logger.warning("VISA write to %s failed: %s", self._resource_string, exc)
            return False
        return True

    def receive(self, capacity: int) -> ReceiveResult:
        """Read at most *capacity* bytes from the instrument.

        One byte more than *capacity* is requested. Backends that ignore the
        count, such as pyvisa-py's USB RAW session, may return the whole
        reply; anything past *capacity* marks the result truncated either way.

        Args:
            capacity: Maximum number of bytes to return.

        Returns:
            The bytes read. ``truncated`` is set when the instrument had more
            than *capacity* bytes to send.

        Raises:
            TransportError: If the resource is not open.
        """
        if self._resource is None:
            raise TransportError("VISA resource is not open")
        try:
            data, status = self._resource.visalib.read(self._resource.session, capacity + 1)
        except self._io_errors() as exc:
            logger.warning("VISA read from %s failed: %s", self._resource_string, exc)
            return ReceiveResult(success=False)
        truncated = len(data) > capacity or status == self._max_count_status()
        return ReceiveResult(success=True, data=bytes(data[:capacity]), truncated=truncated)

    # -- Private helpers -----------------------------------------------------

    def _io_errors(self) -> tuple[type[BaseException], ...]:
        return (self._pyvisa.errors.VisaIOError, OSError)

    def _max_count_status(self) -> Any:
        return self._pyvisa.constants.StatusCode.success_max_count_read
