"""WT3000 response decoder.

Interprets reply bytes according to the formatting the instrument was told
to use: the header flag decides whether a response header must be skipped,
and the numeric format selects ASCII or binary float decoding.
"""

from __future__ import annotations

from wtlink_scpi.response import (
    BLOCK_MARKER,
    RESPONSE_TERMINATOR,
    decode_ascii_numbers,
    decode_float_block,
    decode_text,
    strip_header,
    strip_terminator,
)

from wtlink_yokogawa.state import ConfigurationState
from wtlink_yokogawa.vocabulary import NumericFormat


class ResponseDecoder:
    """Decode WT3000 replies.

    Args:
        terminator: Byte sequence ending each reply.
    """

    def __init__(self, terminator: bytes = RESPONSE_TERMINATOR) -> None:
        self._terminator = terminator

    @property
    def terminator(self) -> bytes:
        """The reply terminator."""
        return self._terminator

    def text(self, data: bytes, settings: ConfigurationState) -> str:
        """Decode an identification or module reply."""
        payload = strip_terminator(data, self._terminator)
        if settings.header:
            payload = strip_header(payload)
        return decode_text(payload)

    def numeric(
        self,
        data: bytes,
        settings: ConfigurationState,
        *,
        minimum: int = 1,
    ) -> tuple[float, ...]:
        """Decode a ``:NUMeric:VALue?`` reply.

        Args:
            data: Raw reply bytes.
            settings: Current instrument formatting.
            minimum: Fewest values expected.

        Returns:
            The values in the order the instrument reported them.

        Raises:
            MalformedNumericResponseError: If the reply cannot be decoded.
        """
        payload = data
        if settings.header:
            payload = strip_header(payload)

        if settings.numeric_format is NumericFormat.FLOAT and payload.startswith(BLOCK_MARKER):
            return decode_float_block(payload, minimum=minimum)

        return decode_ascii_numbers(strip_terminator(payload, self._terminator), minimum=minimum)
