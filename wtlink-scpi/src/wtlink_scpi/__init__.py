"""SCPI protocol library for wtlink instrument drivers.

This package provides the instrument-independent half of a SCPI driver:

- Command grammar over a closed mnemonic vocabulary
- Byte transport abstraction with bounded, truncation-aware receives
- PyVISA-backed byte transport for real instruments
- Number parsing and response decoding (ASCII lists and IEEE 488.2 float blocks)
- Custom exception types for SCPI protocol errors

Typical usage::

    from wtlink_scpi import VisaByteTransport

    transport = VisaByteTransport("USB0::0x0B21::0x0025::91K000001::RAW")
    transport.open()
    transport.send(b"*IDN?")
    print(transport.receive(256).data)
    transport.close()
"""

from wtlink_scpi.command import Command, build_command
from wtlink_scpi.errors import (
    InvalidArgumentError,
    MalformedCommandError,
    MalformedNumericResponseError,
    ScpiError,
    TransportError,
    TruncatedResponseError,
)
from wtlink_scpi.number import BoolStyle, format_bool, parse_number, parse_numbers
from wtlink_scpi.response import (
    RESPONSE_TERMINATOR,
    decode_ascii_numbers,
    decode_float_block,
    decode_text,
    parse_idn_response,
    strip_header,
    strip_terminator,
)
from wtlink_scpi.transport import ByteTransport, ReceiveResult
from wtlink_scpi.visa import VisaByteTransport

__all__ = [
    # Command grammar
    "Command",
    "build_command",
    # Errors
    "InvalidArgumentError",
    "MalformedCommandError",
    "MalformedNumericResponseError",
    "ScpiError",
    "TransportError",
    "TruncatedResponseError",
    # Number parsing/formatting
    "BoolStyle",
    "format_bool",
    "parse_number",
    "parse_numbers",
    # Response decoding
    "RESPONSE_TERMINATOR",
    "decode_ascii_numbers",
    "decode_float_block",
    "decode_text",
    "parse_idn_response",
    "strip_header",
    "strip_terminator",
    # Transport
    "ByteTransport",
    "ReceiveResult",
    # VISA
    "VisaByteTransport",
]
