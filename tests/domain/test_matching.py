"""Tests for glob matching and last-match-wins resolution."""

import pytest

from src.spantypes.domain.entities import Device, LineType, Rule, Span
from src.spantypes.domain.matching import (
    escape_pattern,
    matches,
    resolve,
    resolve_devices,
    span_matches,
)

USB_PATH = "/sys/devices/pci0000:00/0000:00:1d.7/usb1/1-3/xbus-00/astribanks:xbus-00"


@pytest.fixture
def usb_device():
    return Device(
        path=USB_PATH,
        hardware_id="usb:X1234567",
        location="usb-0000:00:1d.7-3",
        spans=(
            Span(1, LineType.T1),
            Span(2, LineType.T1),
            Span(3, LineType.T1),
            Span(4, LineType.T1),
            Span(5, LineType.OTHER),
        ),
    )


@pytest.fixture
def path_only_device():
    return Device(path="/sys/devices/platform/dahdi_dummy", spans=(Span(1, LineType.E1),))


def rule(identifier, span, target):
    return Rule(identifier_pattern=identifier, span_pattern=span, target_type=LineType(target))


class TestGlobMatching:
    """Tests for matches() and span_matches()."""

    @pytest.mark.parametrize("value", ["", "usb:X1234567", "/sys/devices/a/b", "@loc"])
    def test_star_matches_everything(self, value):
        assert matches("*", value) is True

    def test_class_matches_listed_span_numbers_only(self):
        matched = [n for n in range(1, 40) if span_matches("[34]", n)]
        assert matched == [3, 4]

    def test_class_is_not_a_numeric_range(self):
        assert span_matches("[1-4]", 3) is True
        assert span_matches("[1-4]", 13) is False
        assert span_matches("1[0-9]", 13) is True

    def test_question_mark_is_single_character(self):
        assert span_matches("?", 7) is True
        assert span_matches("?", 12) is False
        assert span_matches("1?", 12) is True

    def test_negated_class(self):
        assert span_matches("[!12]", 3) is True
        assert span_matches("[!12]", 1) is False
        assert span_matches("[^12]", 2) is False

    def test_match_is_anchored(self):
        assert matches("usb:X123", "usb:X1234567") is False
        assert matches("usb:X123*", "usb:X1234567") is True
        assert matches("*4567", "usb:X1234567") is True

    def test_match_is_case_sensitive(self):
        assert matches("usb:x1234567", "usb:X1234567") is False

    def test_star_crosses_path_separators(self):
        assert matches("/sys/devices/*/astribanks:xbus-00", USB_PATH) is True

    def test_regex_metacharacters_are_literal(self):
        assert matches("pci:0000:00:1e.0", "pci:0000:00:1e.0") is True
        assert matches("pci:0000:00:1e.0", "pci:0000:00:1eX0") is False
        assert matches("a+b", "a+b") is True
        assert matches("a+b", "aab") is False

    def test_unterminated_bracket_is_literal(self):
        assert matches("[abc", "[abc") is True
        assert matches("[abc", "a") is False

    def test_escaped_value_matches_only_itself(self):
        value = "pci:[0]*?x"
        pattern = escape_pattern(value)

        assert pattern == "pci:[[]0][*][?]x"
        assert matches(pattern, value) is True
        assert matches(pattern, "pci:0Zx") is False
        assert escape_pattern("usb:X1234567") == "usb:X1234567"


class TestResolve:
    """Tests for resolve()."""

    def test_last_match_wins(self, usb_device):
        rules = [rule("*", "*", "T1"), rule(USB_PATH, "[34]", "E1")]

        assert resolve(rules, usb_device, usb_device.spans[2]) == LineType.E1
        assert resolve(rules, usb_device, usb_device.spans[0]) == LineType.T1

    def test_rule_order_is_load_bearing(self, usb_device):
        rules = [rule(USB_PATH, "[34]", "E1"), rule("*", "*", "T1")]

        assert resolve(rules, usb_device, usb_device.spans[2]) == LineType.T1

    def test_all_rules_scanned_after_first_match(self, usb_device):
        rules = [
            rule("*", "*", "E1"),
            rule("usb:X1234567", "*", "J1"),
            rule("@usb-0000:00:1d.7-3", "3", "T1"),
        ]

        assert resolve(rules, usb_device, usb_device.spans[2]) == LineType.T1
        assert resolve(rules, usb_device, usb_device.spans[1]) == LineType.J1

    def test_match_by_hardware_id(self, usb_device):
        assert resolve([rule("usb:X*", "1", "E1")], usb_device, usb_device.spans[0]) == LineType.E1

    def test_match_by_location_requires_at_prefix(self, usb_device):
        span = usb_device.spans[0]
        assert resolve([rule("@usb-0000:00:1d.7-3", "1", "J1")], usb_device, span) == LineType.J1
        assert resolve([rule("usb-0000:00:1d.7-3", "1", "J1")], usb_device, span) is None

    def test_device_with_only_path(self, path_only_device):
        span = path_only_device.spans[0]
        rules = [rule("/sys/devices/platform/*", "*", "T1")]

        assert resolve(rules, path_only_device, span) == LineType.T1

    def test_no_rules_yields_none(self, usb_device):
        assert resolve([], usb_device, usb_device.spans[0]) is None

    def test_no_matching_rule_yields_none(self, usb_device):
        rules = [rule("usb:OTHER", "*", "E1"), rule("*", "9", "E1")]
        assert resolve(rules, usb_device, usb_device.spans[0]) is None

    def test_non_assignable_span_never_resolves(self, usb_device):
        assert resolve([rule("*", "*", "E1")], usb_device, usb_device.spans[4]) is None


class TestResolveDevices:
    """Tests for resolve_devices()."""

    def test_skips_non_assignable_spans(self, usb_device, path_only_device):
        resolutions = resolve_devices([rule("*", "*", "E1")], [usb_device, path_only_device])

        assert [(r.device.path, r.span.number) for r in resolutions] == [
            (USB_PATH, 1),
            (USB_PATH, 2),
            (USB_PATH, 3),
            (USB_PATH, 4),
            ("/sys/devices/platform/dahdi_dummy", 1),
        ]
        assert all(r.resolved_type == LineType.E1 for r in resolutions)

    def test_unmatched_spans_are_kept_with_none(self, usb_device):
        resolutions = resolve_devices([rule("*", "1", "E1")], [usb_device])

        assert [r.resolved_type for r in resolutions] == [LineType.E1, None, None, None]
