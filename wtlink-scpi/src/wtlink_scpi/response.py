"""SCPI response decoding primitives.

Functions here turn raw reply bytes into text, numbers, or an
:class:`InstrumentIdentity`. They are stateless; instrument packages decide
which ones to apply based on how the instrument has been told to format its
replies.
"""

from __future__ import annotations

import struct

from wtlink_core.types import InstrumentIdentity

from wtlink_scpi.errors import MalformedNumericResponseError
from wtlink_scpi.number import parse_numbers

RESPONSE_TERMINATOR = b"\n"
"""Default byte sequence terminating an instrument reply."""

BLOCK_MARKER = b"#"

_FLOAT32_SIZE = 4


def strip_terminator(data: bytes, terminator: bytes = RESPONSE_TERMINATOR) -> bytes:
    """Remove the trailing reply terminator.

    A carriage return immediately before the terminator is removed as well.

    Args:
        data: Raw reply bytes.
        terminator: Terminator byte sequence.

    Returns:
        *data* without its framing.
    """
    if terminator and data.endswith(terminator):
        data = data[: -len(terminator)]
    if data.endswith(b"\r"):
        data = data[:-1]
    return data


def strip_header(data: bytes) -> bytes:
    """Remove a response header such as ``:NUM:VAL`` from a reply.

    Instruments with header mode enabled prefix each reply with the program
    header of the query followed by a space. Replies that do not start with a
    ``:`` header are returned unchanged.

    Args:
        data: Reply bytes with the terminator still attached or removed.

    Returns:
        The reply data after the header.
    """
    if not data.startswith(b":"):
        return data
    _, separator, rest = data.partition(b" ")
    if not separator:
        return b""
    return rest


def decode_text(data: bytes) -> str:
    """Decode a text reply that has had its framing removed.

    Args:
        data: Reply bytes.

    Returns:
        The reply as a string. Bytes outside ASCII are replaced.
    """
    return data.decode("ascii", errors="replace")


def decode_ascii_numbers(data: bytes, *, minimum: int = 1) -> tuple[float, ...]:
    """Decode a comma-separated ASCII reply into floats.

    Args:
        data: Reply bytes with framing and header removed.
        minimum: Fewest values the caller expects. An empty reply is only
            accepted when this is zero.

    Returns:
        One float per comma-separated field, in reply order.

    Raises:
        MalformedNumericResponseError: If the reply is not ASCII, a field is
            not a number, or fewer than *minimum* values are present.
    """
    try:
        text = data.decode("ascii").strip()
    except UnicodeDecodeError as exc:
        raise MalformedNumericResponseError(f"Numeric reply is not ASCII: {data!r}") from exc

    if not text:
        if minimum > 0:
            raise MalformedNumericResponseError(
                f"Empty numeric reply, expected at least {minimum} value(s)"
            )
        return ()

    try:
        values = parse_numbers(text)
    except ValueError as exc:
        raise MalformedNumericResponseError(str(exc)) from exc

    _check_minimum(values, minimum)
    return values


def decode_float_block(data: bytes, *, minimum: int = 1, byte_order: str = ">") -> tuple[float, ...]:
    """Decode an IEEE 488.2 block of single-precision floats.

    The block is ``#<n><length><payload>`` where ``<n>`` is the number of
    digits in ``<length>``. ``#0`` introduces an indefinite-length block that
    runs to the end of *data* (minus a terminating newline). Bytes after a
    definite-length payload are ignored.

    Args:
        data: Reply bytes starting at the ``#`` marker.
        minimum: Fewest values the caller expects.
        byte_order: :mod:`struct` byte order character. Defaults to
            big-endian.

    Returns:
        The decoded values in block order.

    Raises:
        MalformedNumericResponseError: If the block header is invalid, the
            payload is shorter than declared, or its length is not a whole
            number of floats.
    """
    if not data.startswith(BLOCK_MARKER) or len(data) < 2:
        raise MalformedNumericResponseError(f"Missing block header: {data[:16]!r}")

    digit_count = data[1:2]
    if not digit_count.isdigit():
        raise MalformedNumericResponseError(f"Invalid block header: {data[:16]!r}")
    width = int(digit_count)

    if width == 0:
        payload = strip_terminator(data[2:])
    else:
        length_field = data[2 : 2 + width]
        if len(length_field) != width or not length_field.isdigit():
            raise MalformedNumericResponseError(f"Invalid block length: {data[:16]!r}")
        length = int(length_field)
        payload = data[2 + width : 2 + width + length]
        if len(payload) != length:
            raise MalformedNumericResponseError(
                f"Block declares {length} bytes but only {len(payload)} were received"
            )

    if len(payload) % _FLOAT32_SIZE:
        raise MalformedNumericResponseError(
            f"Block length {len(payload)} is not a multiple of {_FLOAT32_SIZE}"
        )

    count = len(payload) // _FLOAT32_SIZE
    values = struct.unpack(f"{byte_order}{count}f", payload)
    _check_minimum(values, minimum)
    return values


def _check_minimum(values: tuple[float, ...], minimum: int) -> None:
    if len(values) < minimum:
        raise MalformedNumericResponseError(
            f"Expected at least {minimum} value(s), got {len(values)}"
        )


def parse_idn_response(response: str) -> InstrumentIdentity:
    """Parse an ``*IDN?`` response into an :class:`InstrumentIdentity`.

    The standard ``*IDN?`` response format is four comma-separated fields::

        manufacturer,model,serial_number,firmware_version

    If the response contains more than four comma-separated fields, the
    extra fields are joined into the firmware string.

    Args:
        response: The ``*IDN?`` response string.

    Returns:
        Parsed identity with manufacturer, model, serial, and firmware.

    Raises:
        ValueError: If the response has fewer than four fields.
    """
    parts = [p.strip() for p in response.split(",")]
    if len(parts) < 4:
        raise ValueError(
            f"Expected at least 4 comma-separated fields in *IDN? response, "
            f"got {len(parts)}: {response!r}"
        )
    return InstrumentIdentity(
        manufacturer=parts[0],
        model=parts[1],
        serial=parts[2],
        firmware=",".join(parts[3:]),
    )
