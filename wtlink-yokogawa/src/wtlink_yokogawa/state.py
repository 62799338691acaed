"""Configuration state of a WT3000 session.

The driver remembers every formatting and behaviour flag it has told the
instrument to adopt. Fields change only after the command that sets them was
sent successfully, so the record never runs ahead of the instrument.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from wtlink_yokogawa.vocabulary import NumericFormat, Transition


@dataclass
class ConfigurationState:
    """Settings confirmed sent to the instrument.

    Defaults match the instrument's power-on state.

    Attributes:
        remote: Remote control armed (front panel locked out).
        overlap: Overlap command execution enabled.
        verbose: Replies use full-length mnemonics.
        header: Replies are prefixed with the query header.
        extended_event_status_enable: Extended event status enable register set.
        status_filter: Transition condition per filter number (``"1"`` .. ).
        numeric_format: Format of numeric replies; None until configured or
            after an unrecognised raw format was sent.
    """

    remote: bool = False
    overlap: bool = False
    verbose: bool = False
    header: bool = False
    extended_event_status_enable: bool = False
    status_filter: dict[str, Transition] = field(default_factory=dict)
    numeric_format: NumericFormat | None = None

    def copy(self) -> ConfigurationState:
        """Return an independent copy of this state."""
        return replace(self, status_filter=dict(self.status_filter))
