"""Yokogawa WT3000 power analyzer driver.

Wraps a :class:`~wtlink_scpi.transport.ByteTransport` with typed methods for
identifying the instrument, arming remote control, configuring how replies
are formatted, and fetching measurement values.

Every command/reply exchange runs under one lock: the instrument does not tag
replies, so interleaved commands from several threads would mix up the
reply stream. Setters update the configuration state only after their
command was sent.

Typical usage::

    from wtlink_yokogawa import create_instrument, usb_resource_string

    wt = create_instrument(usb_resource_string("91K000001"))
    print(wt.identify())
    wt.set_numeric_format(NumericFormat.ASCII)
    print(wt.get_numeric_values_as_floats())
    wt.close()
"""

from __future__ import annotations

import itertools
import logging
import threading
from pathlib import Path
from typing import Any

from wtlink_core.types import ConnectionState, InstrumentIdentity
from wtlink_scpi.command import Command, build_command
from wtlink_scpi.errors import (
    InvalidArgumentError,
    MalformedCommandError,
    ScpiError,
    TransportError,
    TruncatedResponseError,
)
from wtlink_scpi.number import format_bool
from wtlink_scpi.response import RESPONSE_TERMINATOR, parse_idn_response
from wtlink_scpi.transport import ByteTransport
from wtlink_scpi.visa import VisaByteTransport

from wtlink_yokogawa.config import (
    DEFAULT_RECEIVE_BUFFER_SIZE,
    Wt3000Config,
    Wt3000Setup,
    load_config,
)
from wtlink_yokogawa.decoder import ResponseDecoder
from wtlink_yokogawa.state import ConfigurationState
from wtlink_yokogawa.vocabulary import (
    BOOLEAN_STYLES,
    Group,
    Header,
    NumericFormat,
    Transition,
    node_number,
)

logger = logging.getLogger(__name__)

_instance_numbers = itertools.count(1)


class Wt3000:
    """High-level driver for the Yokogawa WT3000.

    Args:
        transport: An open transport to the instrument.
        terminator: Byte sequence ending each reply.
        receive_buffer_size: Capacity used for replies the driver reads
            itself, including :meth:`get_numeric_values_as_floats`.
        name: Suffix of the instance logger name. Defaults to a name unique
            to this instance, so each instance has its own log level.
    """

    def __init__(
        self,
        transport: ByteTransport,
        *,
        terminator: bytes = RESPONSE_TERMINATOR,
        receive_buffer_size: int = DEFAULT_RECEIVE_BUFFER_SIZE,
        name: str | None = None,
    ) -> None:
        if receive_buffer_size <= 0:
            raise ValueError("receive_buffer_size must be > 0")
        self._transport = transport
        self._decoder = ResponseDecoder(terminator)
        self._receive_buffer_size = receive_buffer_size
        self._settings = ConfigurationState()
        self._state = ConnectionState.DISCONNECTED
        self._lock = threading.RLock()
        if name is None:
            name = f"wt3000-{next(_instance_numbers)}"
        self._logger = logger.getChild(name)

    # -- Properties ---------------------------------------------------------

    @property
    def transport(self) -> ByteTransport:
        """The transport used to reach the instrument."""
        return self._transport

    @transport.setter
    def transport(self, transport: ByteTransport) -> None:
        with self._lock:
            self._transport = transport

    @property
    def settings(self) -> ConfigurationState:
        """A copy of the settings confirmed sent to the instrument."""
        with self._lock:
            return self._settings.copy()

    @property
    def state(self) -> ConnectionState:
        """Current session state."""
        return self._state

    @property
    def log_level(self) -> int:
        """Effective level of this instrument's logger."""
        return self._logger.getEffectiveLevel()

    @log_level.setter
    def log_level(self, level: int | str) -> None:
        if isinstance(level, str):
            level = level.upper()
        self._logger.setLevel(level)

    # -- Session ------------------------------------------------------------

    def connect(self) -> None:
        """Prepare the instrument for remote operation.

        Clears the status registers and error queue, then arms remote
        control. Each call sends the full sequence again.

        Raises:
            TransportError: If a command cannot be sent.
        """
        with self._lock:
            self.clear_status()
            self.set_remote(True)
            if self._state is ConnectionState.DISCONNECTED:
                self._state = ConnectionState.CONNECTED
        self._logger.info("Connected")

    def configure(self, setup: Wt3000Setup) -> None:
        """Apply response formatting in one locked sequence.

        Args:
            setup: Formatting to apply.

        Raises:
            TransportError: If a command cannot be sent. Settings applied
                before the failure stay applied.
        """
        with self._lock:
            self.set_verbose(setup.verbose)
            self.set_header(setup.header)
            self.set_overlap(setup.overlap)
            self.set_extended_event_status_enable(setup.extended_event_status_enable)
            for number, condition in sorted(setup.status_filters.items()):
                self.set_status_filter(number, condition)
            self.set_numeric_format(setup.numeric_format)
            self._state = ConnectionState.CONFIGURED

    def close(self) -> None:
        """Close the underlying transport."""
        with self._lock:
            self._transport.close()
            self._state = ConnectionState.DISCONNECTED
        self._logger.info("Closed")

    # -- Identity / status --------------------------------------------------

    def identify(self) -> str:
        """Query the instrument model (``*IDN?``).

        Returns:
            The identification string.

        Raises:
            TransportError: If the query cannot be sent or the reply read.
            TruncatedResponseError: If the reply exceeds the receive buffer.
        """
        return self._query_text(Command.query(Group.IDENTIFY))

    def get_identity(self) -> InstrumentIdentity:
        """Query and parse instrument identification (``*IDN?``).

        Returns:
            Parsed identity with manufacturer, model, serial, and firmware.
        """
        return parse_idn_response(self.identify())

    def clear_status(self) -> None:
        """Clear the standard event register, extended event register, and error queue."""
        with self._lock:
            self._send(Command.set(Group.CLEAR_STATUS))

    def get_input_module(self, number: int | str) -> str:
        """Query the input element type installed in a slot.

        Args:
            number: Element number (1-based).

        Returns:
            The module type string reported by the instrument.

        Raises:
            InvalidArgumentError: If *number* is not a positive integer.
            TransportError: If the query cannot be sent or the reply read.
        """
        element = node_number(number, "input element number")
        return self._query_text(Command.query(Group.INPUT, Header.MODULE, suffix=element))

    # -- Settings -----------------------------------------------------------

    def set_remote(self, enabled: bool) -> None:
        """Arm or release remote control."""
        self._set_flag(Group.COMMUNICATE, Header.REMOTE, "remote", enabled)

    def set_overlap(self, enabled: bool) -> None:
        """Set whether commands may execute as overlap commands."""
        self._set_flag(Group.COMMUNICATE, Header.OVERLAP, "overlap", enabled)

    def set_verbose(self, enabled: bool) -> None:
        """Set whether replies use full-length mnemonics."""
        self._set_flag(Group.COMMUNICATE, Header.VERBOSE, "verbose", enabled)

    def set_header(self, enabled: bool) -> None:
        """Set whether replies are prefixed with the query header."""
        self._set_flag(Group.COMMUNICATE, Header.HEADER, "header", enabled)

    def set_extended_event_status_enable(self, enabled: bool) -> None:
        """Set the extended event status enable register."""
        self._set_flag(
            Group.STATUS,
            Header.EXTENDED_EVENT_STATUS_ENABLE,
            "extended_event_status_enable",
            enabled,
        )

    def set_status_filter(self, number: int | str, condition: Transition | str) -> None:
        """Set the transition a status filter latches on.

        Args:
            number: Filter number (1-based).
            condition: ``Transition`` member or one of ``"Rise"``, ``"Fall"``,
                ``"Both"``, ``"Never"`` (any case).

        Raises:
            InvalidArgumentError: If *condition* or *number* is invalid.
                Nothing is sent in that case.
            TransportError: If the command cannot be sent.
        """
        transition = Transition.parse(condition)
        filter_number = node_number(number, "status filter number")
        command = Command.set(Group.STATUS, Header.FILTER, transition.value, suffix=filter_number)
        with self._lock:
            self._send(command)
            self._settings.status_filter[str(filter_number)] = transition
        self._logger.debug("status_filter[%d] set to %s", filter_number, transition.value)

    def set_numeric_format(self, numeric_format: NumericFormat) -> None:
        """Select the wire format of numeric replies.

        Args:
            numeric_format: The format to select.

        Raises:
            InvalidArgumentError: If *numeric_format* is not a NumericFormat.
            TransportError: If the command cannot be sent.
        """
        if not isinstance(numeric_format, NumericFormat):
            raise InvalidArgumentError(
                f"Expected a NumericFormat, got {numeric_format!r}; "
                f"use set_numeric_format_raw() to send arbitrary text"
            )
        self._write_numeric_format(numeric_format.value, numeric_format)

    def set_numeric_format_raw(self, text: str) -> None:
        """Send ``:NUMeric:FORMat`` with *text* verbatim, without validation.

        The recorded format is the one *text* names when it is a known token,
        otherwise None so replies are decoded as ASCII.

        Raises:
            MalformedCommandError: If *text* is not ASCII.
            TransportError: If the command cannot be sent.
        """
        self._write_numeric_format(text, NumericFormat.from_token(text))

    # -- Measurements -------------------------------------------------------

    def get_numeric_values(self, buffer: bytearray | memoryview, max_length: int | None = None) -> int:
        """Query numeric data and read the raw reply into *buffer*.

        Args:
            buffer: Writable destination.
            max_length: Most bytes to receive. Defaults to ``len(buffer)``.

        Returns:
            Number of bytes received into *buffer*.

        Raises:
            InvalidArgumentError: If *max_length* is not in ``1..len(buffer)``.
            TransportError: If the query cannot be sent or the reply read.
            TruncatedResponseError: If the instrument had more data than
                *max_length* bytes. The partial data is in *buffer*.
        """
        capacity = len(buffer) if max_length is None else max_length
        if capacity < 1 or capacity > len(buffer):
            raise InvalidArgumentError(
                f"max_length must be between 1 and {len(buffer)}, got {max_length}"
            )

        with self._lock:
            self._send(Command.query(Group.NUMERIC, Header.VALUE))
            result = self._transport.receive(capacity)

        if not result.success:
            raise TransportError("Failed to receive numeric values")
        data = result.data[:capacity]
        buffer[: len(data)] = data
        if result.truncated or len(result.data) > capacity:
            raise TruncatedResponseError(len(data), capacity)
        self._logger.debug("<- %d bytes of numeric data", len(data))
        return len(data)

    def get_numeric_values_as_floats(self) -> list[float]:
        """Query numeric data and decode it.

        Errors are logged and produce an empty list. Use
        :meth:`get_numeric_values` to see the cause of a failure.

        Returns:
            The measured values in instrument order, or ``[]`` on failure.
        """
        buffer = bytearray(self._receive_buffer_size)
        try:
            with self._lock:
                length = self.get_numeric_values(buffer)
                values = self._decoder.numeric(bytes(buffer[:length]), self._settings)
        except ScpiError as exc:
            self._logger.error("Failed to read numeric values: %s", exc)
            return []
        return list(values)

    # -- Private helpers ----------------------------------------------------

    def _send(self, command: Command) -> None:
        """Build and send *command* (caller holds the lock)."""
        text = build_command(command)
        try:
            data = text.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedCommandError(f"Command is not ASCII: {text!r}") from exc
        self._logger.debug("-> %s", text)
        if not self._transport.send(data):
            raise TransportError(f"Failed to send {text!r}")

    def _receive(self, capacity: int) -> bytes:
        """Receive one complete reply (caller holds the lock)."""
        result = self._transport.receive(capacity)
        if not result.success:
            raise TransportError("Failed to receive response")
        if result.truncated or len(result.data) > capacity:
            raise TruncatedResponseError(min(len(result.data), capacity), capacity)
        self._logger.debug("<- %r", result.data)
        return result.data

    def _query_text(self, command: Command) -> str:
        with self._lock:
            self._send(command)
            data = self._receive(self._receive_buffer_size)
            return self._decoder.text(data, self._settings)

    def _set_flag(self, group: Group, header: Header, name: str, enabled: bool) -> None:
        argument = format_bool(enabled, BOOLEAN_STYLES[header])
        self._write_setting(Command.set(group, header, argument), name, enabled)

    def _write_setting(self, command: Command, name: str, value: Any) -> None:
        with self._lock:
            self._send(command)
            setattr(self._settings, name, value)
        self._logger.debug("%s set to %s", name, value)

    def _write_numeric_format(self, token: str, numeric_format: NumericFormat | None) -> None:
        with self._lock:
            self._write_setting(
                Command.set(Group.NUMERIC, Header.FORMAT, token), "numeric_format", numeric_format
            )
            if self._state is ConnectionState.CONNECTED:
                self._state = ConnectionState.CONFIGURED


def create_instrument(
    visa_address: str,
    *,
    timeout_ms: int = 5000,
    terminator: bytes = RESPONSE_TERMINATOR,
    receive_buffer_size: int = DEFAULT_RECEIVE_BUFFER_SIZE,
    connect: bool = True,
) -> Wt3000:
    """Create a WT3000 driver from a VISA address.

    Opens a :class:`VisaByteTransport`, wraps it in a :class:`Wt3000`, and
    by default connects it.

    Args:
        visa_address: VISA resource string
            (e.g. ``"USB0::0x0B21::0x0025::91K000001::RAW"``).
        timeout_ms: Transport I/O timeout in milliseconds.
        terminator: Message terminator used for writes and replies.
        receive_buffer_size: Receive buffer size for numeric reads.
        connect: Call :meth:`Wt3000.connect` before returning.

    Returns:
        Ready-to-use driver instance.
    """
    transport = VisaByteTransport(visa_address, timeout_ms=timeout_ms, write_termination=terminator)
    transport.open()
    instrument = Wt3000(
        transport,
        terminator=terminator,
        receive_buffer_size=receive_buffer_size,
    )
    if connect:
        try:
            instrument.connect()
        except ScpiError:
            transport.close()
            raise
    return instrument


def create_instrument_from_config(config: Wt3000Config | str | Path) -> Wt3000:
    """Create, connect and configure a WT3000 from configuration.

    Args:
        config: A parsed configuration or the path of a YAML file.

    Returns:
        Connected driver with the configured setup applied.
    """
    if not isinstance(config, Wt3000Config):
        config = load_config(config)

    instrument = create_instrument(
        config.resource,
        timeout_ms=config.timeout_ms,
        terminator=config.terminator,
        receive_buffer_size=config.receive_buffer_size,
        connect=False,
    )
    if config.log_level is not None:
        instrument.log_level = config.log_level
    try:
        instrument.connect()
        instrument.configure(config.setup)
    except ScpiError:
        instrument.close()
        raise
    return instrument
