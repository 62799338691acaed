"""SCPI command grammar.

Commands are composed from a closed vocabulary of mnemonics. Instrument
packages define their vocabulary as :class:`~enum.Enum` classes whose values
are the mnemonic strings (``":COMMunicate"``, ``":REMote"``, ...); this module
only concatenates members of such enums and never invents identifiers.

The two shapes produced are::

    <group>[<header>[<suffix>]]?              query
    <group>[<header>[<suffix>]][ <argument>]  set

Typical usage::

    from wtlink_scpi import Command, build_command

    build_command(Command.query(Group.NUMERIC, Header.VALUE))
    # ':NUMeric:VALue?'
    build_command(Command.set(Group.COMMUNICATE, Header.REMOTE, "ON"))
    # ':COMMunicate:REMote ON'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wtlink_scpi.errors import MalformedCommandError

QUERY_SUFFIX = "?"
ARGUMENT_SEPARATOR = " "


@dataclass(frozen=True)
class Command:
    """A single instrument command or query.

    Attributes:
        group: Root mnemonic (e.g. ``Group.COMMUNICATE`` or ``Group.IDENTIFY``).
        header: Optional sub-node mnemonic (e.g. ``Header.REMOTE``).
        suffix: Optional numeric node suffix appended to the header
            (``:MODUle1``, ``:FILTer3``).
        argument: Optional value for set commands. Queries take none.
        is_query: Whether the command requests a reply.
    """

    group: Enum
    header: Enum | None = None
    suffix: int | None = None
    argument: str | None = None
    is_query: bool = False

    @classmethod
    def query(cls, group: Enum, header: Enum | None = None, suffix: int | None = None) -> Command:
        """Create a query command."""
        return cls(group=group, header=header, suffix=suffix, is_query=True)

    @classmethod
    def set(
        cls,
        group: Enum,
        header: Enum | None = None,
        argument: str | None = None,
        suffix: int | None = None,
    ) -> Command:
        """Create a set command."""
        return cls(group=group, header=header, suffix=suffix, argument=argument)

    def build(self) -> str:
        """Return the wire string for this command. See :func:`build_command`."""
        return build_command(self)


def _mnemonic(member: object, role: str) -> str:
    if not isinstance(member, Enum) or not isinstance(member.value, str) or not member.value:
        raise MalformedCommandError(f"{role} must be a vocabulary mnemonic, got {member!r}")
    return member.value


def build_command(command: Command) -> str:
    """Build the exact ASCII string to transmit for *command*.

    Args:
        command: The command to render.

    Returns:
        ``group + header + suffix + "?"`` for queries, or
        ``group + header + suffix + " " + argument`` for set commands (the
        separator and argument are omitted when there is no argument).

    Raises:
        MalformedCommandError: If the group or header is not a vocabulary
            member, the suffix is not a positive integer or has no header to
            attach to, or a query carries a non-empty argument.
    """
    text = _mnemonic(command.group, "group")

    if command.header is not None:
        text += _mnemonic(command.header, "header")

    if command.suffix is not None:
        if command.header is None:
            raise MalformedCommandError("A numeric suffix requires a header")
        if isinstance(command.suffix, bool) or not isinstance(command.suffix, int):
            raise MalformedCommandError(f"Suffix must be an integer, got {command.suffix!r}")
        if command.suffix < 1:
            raise MalformedCommandError(f"Suffix must be >= 1, got {command.suffix}")
        text += str(command.suffix)

    if command.is_query:
        if command.argument:
            raise MalformedCommandError(
                f"Query {text}{QUERY_SUFFIX} cannot take an argument ({command.argument!r})"
            )
        return text + QUERY_SUFFIX

    if command.argument:
        text += ARGUMENT_SEPARATOR + command.argument
    return text
