"""YAML configuration loading for WT3000 instruments.

This module parses the settings needed to open a WT3000 session and the
response formatting to apply once connected.

Example YAML configuration:
    wt3000:
      resource: "USB0::0x0B21::0x0025::91K000001::RAW"
      timeout_ms: 5000
      terminator: "\\n"
      receive_buffer_size: 4096
      log_level: INFO
      setup:
        verbose: false
        header: false
        overlap: false
        extended_event_status_enable: false
        numeric_format: ASCii
        status_filters:
          "1": RISE
          "2": BOTH
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from wtlink_scpi.errors import InvalidArgumentError

from wtlink_yokogawa.vocabulary import NumericFormat, Transition, node_number

DEFAULT_RECEIVE_BUFFER_SIZE = 4096
"""Receive buffer used when fetching numeric values."""


@dataclass(frozen=True)
class Wt3000Setup:
    """Response formatting applied after connecting.

    Attributes:
        verbose: Use full-length mnemonics in replies.
        header: Prefix replies with the query header.
        overlap: Enable overlap command execution.
        extended_event_status_enable: Set the extended event status enable register.
        numeric_format: Format of numeric replies.
        status_filters: Transition condition per filter number.
    """

    verbose: bool = False
    header: bool = False
    overlap: bool = False
    extended_event_status_enable: bool = False
    numeric_format: NumericFormat = NumericFormat.ASCII
    status_filters: dict[str, Transition] = field(default_factory=dict)


@dataclass(frozen=True)
class Wt3000Config:
    """Connection settings for a WT3000.

    Attributes:
        resource: VISA resource string of the instrument.
        timeout_ms: Transport I/O timeout in milliseconds.
        terminator: Reply terminator bytes.
        receive_buffer_size: Buffer size for numeric value reads.
        log_level: Optional logging level name for the driver logger.
        setup: Formatting to apply after connecting.
    """

    resource: str
    timeout_ms: int = 5000
    terminator: bytes = b"\n"
    receive_buffer_size: int = DEFAULT_RECEIVE_BUFFER_SIZE
    log_level: str | None = None
    setup: Wt3000Setup = field(default_factory=Wt3000Setup)

    def __post_init__(self) -> None:
        if not self.resource:
            raise ValueError("resource must be non-empty")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        if not self.terminator:
            raise ValueError("terminator must be non-empty")
        if self.receive_buffer_size <= 0:
            raise ValueError("receive_buffer_size must be > 0")
        if self.log_level is not None and not isinstance(
            logging.getLevelName(str(self.log_level).upper()), int
        ):
            raise ValueError(f"Unknown log_level: {self.log_level!r}")


def _parse_bool(section: dict[str, Any], key: str) -> bool:
    value = section.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"setup.{key} must be a boolean")
    return value


def _parse_setup(section: Any) -> Wt3000Setup:
    if section is None:
        return Wt3000Setup()
    if not isinstance(section, dict):
        raise ValueError("setup must be a mapping")

    format_token = section.get("numeric_format", NumericFormat.ASCII.value)
    numeric_format = NumericFormat.from_token(str(format_token))
    if numeric_format is None:
        raise ValueError(f"Unknown setup.numeric_format: {format_token!r}")

    filters_data = section.get("status_filters") or {}
    if not isinstance(filters_data, dict):
        raise ValueError("setup.status_filters must be a mapping")
    status_filters: dict[str, Transition] = {}
    for number, condition in filters_data.items():
        try:
            key = str(node_number(number, "status filter number"))
            status_filters[key] = Transition.parse(condition)
        except InvalidArgumentError as exc:
            raise ValueError(f"Invalid setup.status_filters entry: {exc}") from exc

    return Wt3000Setup(
        verbose=_parse_bool(section, "verbose"),
        header=_parse_bool(section, "header"),
        overlap=_parse_bool(section, "overlap"),
        extended_event_status_enable=_parse_bool(section, "extended_event_status_enable"),
        numeric_format=numeric_format,
        status_filters=status_filters,
    )


def parse_config(data: Any) -> Wt3000Config:
    """Build a configuration from a parsed YAML document.

    Args:
        data: Mapping with a top-level ``wt3000`` section.

    Returns:
        Parsed configuration.

    Raises:
        ValueError: If the config is invalid or missing required fields.
    """
    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping")

    section = data.get("wt3000")
    if not isinstance(section, dict):
        raise ValueError("Missing required section: wt3000")

    resource = section.get("resource")
    if not resource:
        raise ValueError("Missing required field: wt3000.resource")

    terminator = section.get("terminator", "\n")
    if not isinstance(terminator, str):
        raise ValueError("wt3000.terminator must be a string")

    return Wt3000Config(
        resource=str(resource),
        timeout_ms=int(section.get("timeout_ms", 5000)),
        terminator=terminator.encode("ascii"),
        receive_buffer_size=int(section.get("receive_buffer_size", DEFAULT_RECEIVE_BUFFER_SIZE)),
        log_level=section.get("log_level"),
        setup=_parse_setup(section.get("setup")),
    )


def load_config(path: str | Path) -> Wt3000Config:
    """Load WT3000 configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config is invalid or missing required fields.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_config(data)
