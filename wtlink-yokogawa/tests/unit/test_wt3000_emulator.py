"""Tests for the WT3000 emulator."""

from __future__ import annotations

import struct

import pytest

from wtlink_yokogawa.emulator import (
    Wt3000Emulator,
    Wt3000EmulatorConfig,
    _normalize_header,
    make_wt3000_emulator,
)
from wtlink_yokogawa.vocabulary import NumericFormat, Transition


def _query(emu: Wt3000Emulator, line: str, capacity: int = 4096) -> bytes:
    assert emu.send(line.encode("ascii"))
    result = emu.receive(capacity)
    assert result.success
    return result.data


class TestNormalizeHeader:
    """Tests for program header normalization."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (":COMMunicate:REMote", ("COMM:REM", None)),
            (":COMM:REM", ("COMM:REM", None)),
            (":communicate:remote", ("COMM:REM", None)),
            (":INPUT:MODULE2", ("INP:MODU", 2)),
            (":STATus:FILTer16", ("STAT:FILT", 16)),
            (":NUM:VAL", ("NUM:VAL", None)),
        ],
    )
    def test_normalize(self, header: str, expected: tuple[str, int | None]) -> None:
        assert _normalize_header(header) == expected


class TestFactory:
    """Tests for make_wt3000_emulator and Wt3000EmulatorConfig."""

    def test_defaults(self) -> None:
        emu = make_wt3000_emulator()
        assert _query(emu, "*IDN?") == b"YOKOGAWA,760301-04-SV,91K000001,F1.01\n"

    def test_elements_in_model(self) -> None:
        emu = make_wt3000_emulator(serial="SN2", elements=2)
        assert _query(emu, "*IDN?") == b"YOKOGAWA,760301-02-SV,SN2,F1.01\n"

    @pytest.mark.parametrize("elements", [0, 5])
    def test_invalid_elements(self, elements: int) -> None:
        with pytest.raises(ValueError, match="elements"):
            make_wt3000_emulator(elements=elements)

    def test_config_requires_identity(self) -> None:
        with pytest.raises(ValueError, match="identity"):
            Wt3000EmulatorConfig(identity="", modules=("760902",))

    def test_config_requires_modules(self) -> None:
        with pytest.raises(ValueError, match="modules"):
            Wt3000EmulatorConfig(identity="YOKOGAWA,760301-01-SV,SN,F1.01", modules=())


class TestCommonCommands:
    """Tests for *IDN? and *CLS."""

    def test_cls_clears_error_queue(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":BOGus ON")
        assert emu.error_queue
        emu.send(b"*CLS")
        assert emu.error_queue == []

    def test_idn_without_query_is_undefined(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b"*IDN")
        assert emu.error_queue == [(-113, "Undefined header")]
        assert not emu.receive(64).success


class TestSettings:
    """Tests for setting commands."""

    @pytest.mark.parametrize(
        ("line", "field"),
        [
            (":COMMunicate:HEADer ON", "header"),
            (":COMM:OVER ON", "overlap"),
            (":COMMunicate:REMote 1", "remote"),
            (":COMMUNICATE:VERBOSE on", "verbose"),
        ],
    )
    def test_flags(self, line: str, field: str) -> None:
        emu = make_wt3000_emulator()
        emu.send(line.encode("ascii"))
        assert getattr(emu.settings, field) is True

    def test_flag_query(self) -> None:
        emu = make_wt3000_emulator()
        assert _query(emu, ":COMM:REM?") == b"0\n"
        emu.send(b":COMMunicate:REMote ON")
        assert _query(emu, ":COMMunicate:REMote?") == b"1\n"

    def test_invalid_flag_argument(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":COMMunicate:HEADer MAYBE")
        assert emu.error_queue == [(-224, "Illegal parameter value")]
        assert emu.settings.header is False

    def test_eese(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":STATus:EESE 1")
        assert emu.settings.extended_event_status_enable is True
        emu.send(b":STATus:EESE 0")
        assert emu.settings.extended_event_status_enable is False

    @pytest.mark.parametrize("argument", ["70000", "-1", "ON"])
    def test_eese_invalid(self, argument: str) -> None:
        emu = make_wt3000_emulator()
        emu.send(f":STATus:EESE {argument}".encode("ascii"))
        assert emu.error_queue == [(-224, "Illegal parameter value")]

    def test_filter(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":STATus:FILTer3 BOTH")
        assert emu.settings.status_filter == {"3": Transition.BOTH}

    def test_filter_out_of_range(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":STATus:FILTer17 RISE")
        assert emu.error_queue == [(-222, "Data out of range")]
        assert emu.settings.status_filter == {}

    def test_filter_bad_condition(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":STATus:FILTer1 UP")
        assert emu.error_queue == [(-224, "Illegal parameter value")]

    def test_numeric_format(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":NUMeric:FORMat FLOat")
        assert emu.settings.numeric_format is NumericFormat.FLOAT
        assert _query(emu, ":NUM:FORM?") == b"FLO\n"

    def test_numeric_format_verbose_query(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":COMM:VERB ON")
        assert _query(emu, ":NUM:FORM?") == b"ASCII\n"

    def test_numeric_format_invalid(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":NUMeric:FORMat REAL")
        assert emu.error_queue == [(-224, "Illegal parameter value")]
        assert emu.settings.numeric_format is None

    def test_undefined_header(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":MEASure:VOLTage?")
        assert emu.error_queue == [(-113, "Undefined header")]


class TestQueries:
    """Tests for measurement and module queries."""

    def test_input_module(self) -> None:
        emu = make_wt3000_emulator()
        assert _query(emu, ":INPut:MODUle4?") == b"760902\n"

    def test_input_module_out_of_range(self) -> None:
        emu = make_wt3000_emulator(elements=2)
        emu.send(b":INPut:MODUle3?")
        assert emu.error_queue == [(-222, "Data out of range")]
        assert not emu.receive(64).success

    def test_values_ascii(self) -> None:
        emu = make_wt3000_emulator()
        emu.set_numeric_values([230.1, float("nan"), float("inf"), float("-inf")])
        assert _query(emu, ":NUMeric:VALue?") == b"2.30100E+02,NAN,INF,-INF\n"

    def test_values_float_block(self) -> None:
        emu = make_wt3000_emulator()
        emu.set_numeric_values([1.5, -2.0, 0.0])
        emu.send(b":NUMeric:FORMat FLOat")
        data = _query(emu, ":NUMeric:VALue?")
        assert data == b"#212" + struct.pack(">3f", 1.5, -2.0, 0.0) + b"\n"

    def test_header_prefix_short(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":COMMunicate:HEADer ON")
        assert _query(emu, ":INPut:MODUle2?") == b":INP:MODU2 760902\n"

    def test_header_prefix_verbose(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":COMMunicate:HEADer ON")
        emu.send(b":COMMunicate:VERBose ON")
        assert _query(emu, ":INPut:MODUle2?") == b":INPUT:MODULE2 760902\n"

    def test_idn_has_no_header_prefix(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b":COMMunicate:HEADer ON")
        assert _query(emu, "*IDN?").startswith(b"YOKOGAWA,")


class TestTransport:
    """Tests for the transport-level behaviour."""

    def test_records_received_lines(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b"*CLS\n")
        emu.send(b":COMMunicate:REMote ON")
        assert emu.received == ["*CLS", ":COMMunicate:REMote ON"]

    def test_receive_without_pending_fails(self) -> None:
        assert not make_wt3000_emulator().receive(64).success

    def test_chunked_reply_flags_truncation(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b"*IDN?")
        first = emu.receive(8)
        assert first.success
        assert first.truncated
        assert first.data == b"YOKOGAWA"
        rest = emu.receive(4096)
        assert not rest.truncated
        assert rest.data == b",760301-04-SV,91K000001,F1.01\n"

    def test_send_discards_pending_reply(self) -> None:
        emu = make_wt3000_emulator()
        emu.send(b"*IDN?")
        emu.send(b"*CLS")
        assert not emu.receive(64).success

    def test_fail_next_send(self) -> None:
        emu = make_wt3000_emulator()
        emu.fail_next_send()
        assert emu.send(b":COMMunicate:REMote ON") is False
        assert emu.received == []
        assert emu.settings.remote is False
        assert emu.send(b":COMMunicate:REMote ON") is True

    def test_fail_next_receive(self) -> None:
        emu = make_wt3000_emulator()
        emu.fail_next_receive(2)
        emu.send(b"*IDN?")
        assert not emu.receive(64).success
        assert not emu.receive(64).success
        assert emu.receive(64).success

    def test_close(self) -> None:
        emu = make_wt3000_emulator()
        emu.close()
        assert emu.is_closed
