"""Tests for shared wtlink types."""

from __future__ import annotations

import pytest

from wtlink_core import ConnectionState, InstrumentIdentity, WtlinkError


class TestInstrumentIdentity:
    """Tests for InstrumentIdentity."""

    def test_fields(self) -> None:
        identity = InstrumentIdentity(
            manufacturer="YOKOGAWA",
            model="760301-04-SV",
            serial="91K000001",
            firmware="F1.01",
        )
        assert identity.manufacturer == "YOKOGAWA"
        assert identity.model == "760301-04-SV"
        assert identity.serial == "91K000001"
        assert identity.firmware == "F1.01"

    def test_frozen(self) -> None:
        identity = InstrumentIdentity("YOKOGAWA", "760301", "SN1", "F1.01")
        with pytest.raises(AttributeError):
            identity.model = "other"  # type: ignore[misc]

    def test_equality(self) -> None:
        a = InstrumentIdentity("YOKOGAWA", "760301", "SN1", "F1.01")
        b = InstrumentIdentity("YOKOGAWA", "760301", "SN1", "F1.01")
        assert a == b


class TestConnectionState:
    """Tests for ConnectionState."""

    def test_members(self) -> None:
        assert [s.value for s in ConnectionState] == [
            "disconnected",
            "connected",
            "configured",
        ]


class TestWtlinkError:
    """Tests for the root exception."""

    def test_is_exception(self) -> None:
        with pytest.raises(Exception):
            raise WtlinkError("boom")
