"""Tests for the span type exception hierarchy."""

from src.spantypes.exceptions import (
    ConfigParseError,
    DeviceEnumerationError,
    DeviceWriteError,
    InvalidOptionError,
    RuleFileNotFoundError,
    SpanTypesError,
)


class TestSpanTypesError:
    def test_str_includes_details(self):
        error = ConfigParseError("Bad line type 'X9'", path="/etc/dahdi/span-types.conf", line_number=2)
        assert str(error) == "Bad line type 'X9' (path=/etc/dahdi/span-types.conf, line=2)"

    def test_to_dict(self):
        cause = OSError("Device or resource busy")
        error = DeviceWriteError("Driver rejected 3:E1", device_path="/sys/a", span_number=3, cause=cause)

        data = error.to_dict()

        assert data["error_type"] == "DeviceWriteError"
        assert data["code"] == "DEVICE_WRITE_ERROR"
        assert data["details"] == {"device": "/sys/a", "span": 3}
        assert data["recoverable"] is True
        assert data["cause"] == "Device or resource busy"
        assert data["timestamp"]

    def test_subclasses_keep_context(self):
        option_error = InvalidOptionError("Unknown line mode 'E2'", option="--line-mode", value="E2")
        assert option_error.option == "--line-mode"
        assert option_error.value == "E2"
        assert option_error.code == "INVALID_OPTION"

        enum_error = DeviceEnumerationError("No devices directory", root="/sys/bus/dahdi_devices/devices")
        assert enum_error.root == "/sys/bus/dahdi_devices/devices"
        assert enum_error.recoverable is False

    def test_missing_rule_file_is_a_parse_error(self):
        error = RuleFileNotFoundError("Rule file not found: /nope", path="/nope")
        assert isinstance(error, ConfigParseError)
        assert isinstance(error, SpanTypesError)
        assert error.code == "CONFIG_PARSE_ERROR"
        assert error.line_number is None
