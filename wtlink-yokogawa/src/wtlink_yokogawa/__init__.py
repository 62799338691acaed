"""Yokogawa WT3000 power analyzer driver and emulator for wtlink.

Modules:
    vocabulary: Command mnemonics, argument tokens, and USB identifiers.
    state: Settings confirmed sent to the instrument.
    decoder: Reply decoding driven by those settings.
    wt3000: High-level driver.
    emulator: In-process emulator for testing without hardware.
    config: YAML configuration loading.

Example:
    Connect to a real instrument::

        from wtlink_yokogawa import create_instrument, usb_resource_string

        wt = create_instrument(usb_resource_string("91K000001"))
        print(wt.identify())
        print(wt.get_numeric_values_as_floats())

    Use an emulator for testing::

        from wtlink_yokogawa import Wt3000, make_wt3000_emulator

        emulator = make_wt3000_emulator()
        emulator.set_numeric_values([230.1, 1.25, 287.6])
        wt = Wt3000(emulator)
        wt.connect()
        wt.get_numeric_values_as_floats()
"""

from wtlink_yokogawa.config import (
    DEFAULT_RECEIVE_BUFFER_SIZE,
    Wt3000Config,
    Wt3000Setup,
    load_config,
    parse_config,
)
from wtlink_yokogawa.decoder import ResponseDecoder
from wtlink_yokogawa.emulator import Wt3000Emulator, Wt3000EmulatorConfig, make_wt3000_emulator
from wtlink_yokogawa.state import ConfigurationState
from wtlink_yokogawa.vocabulary import (
    BOOLEAN_STYLES,
    ENDPOINT_RECEIVE,
    ENDPOINT_TRANSMIT,
    USB_PRODUCT_ID,
    USB_VENDOR_ID,
    Group,
    Header,
    NumericFormat,
    Transition,
    usb_resource_string,
)
from wtlink_yokogawa.wt3000 import Wt3000, create_instrument, create_instrument_from_config

__all__ = [
    # Configuration
    "DEFAULT_RECEIVE_BUFFER_SIZE",
    "Wt3000Config",
    "Wt3000Setup",
    "load_config",
    "parse_config",
    # Decoding and state
    "ConfigurationState",
    "ResponseDecoder",
    # Emulator
    "Wt3000Emulator",
    "Wt3000EmulatorConfig",
    "make_wt3000_emulator",
    # Vocabulary
    "BOOLEAN_STYLES",
    "ENDPOINT_RECEIVE",
    "ENDPOINT_TRANSMIT",
    "USB_PRODUCT_ID",
    "USB_VENDOR_ID",
    "Group",
    "Header",
    "NumericFormat",
    "Transition",
    "usb_resource_string",
    # Driver
    "Wt3000",
    "create_instrument",
    "create_instrument_from_config",
]
