"""Root exception of the wtlink packages.

Every error raised on purpose by wtlink derives from :class:`WtlinkError`:

    WtlinkError
    +-- ScpiError (wtlink_scpi): command, transport and decoding failures
"""


class WtlinkError(Exception):
    """Base class for errors raised by wtlink packages."""
