"""Tests for the rule file parser adapter."""

import pytest

from src.spantypes.adapters.rule_parser import TextRuleParser
from src.spantypes.domain.entities import LineType, Rule
from src.spantypes.exceptions import ConfigParseError, RuleFileNotFoundError

SAMPLE_RULES = """\
# Default for everything
*                 *:T1

usb:X1234567      [34]:E1   # the two E1 ports
   @usb-0000:00:1d.7-3   1:J1
/sys/devices/pci0000:00/0000:00:1e.0/pci0000:00:1e.0    *:E1
"""


@pytest.fixture
def parser():
    return TextRuleParser()


class TestTextRuleParser:
    """Tests for TextRuleParser."""

    def test_parse_valid_rules(self, parser):
        rules = parser.parse(SAMPLE_RULES)

        assert rules == [
            Rule("*", "*", LineType.T1, line_number=2),
            Rule("usb:X1234567", "[34]", LineType.E1, line_number=4),
            Rule("@usb-0000:00:1d.7-3", "1", LineType.J1, line_number=5),
            Rule("/sys/devices/pci0000:00/0000:00:1e.0/pci0000:00:1e.0", "*", LineType.E1, line_number=6),
        ]

    def test_parse_preserves_file_order(self, parser):
        rules = parser.parse("* *:E1\n* *:T1\n* *:J1\n")
        assert [r.target_type for r in rules] == [LineType.E1, LineType.T1, LineType.J1]

    def test_parse_empty_and_comment_only(self, parser):
        assert parser.parse("") == []
        assert parser.parse("# nothing here\n   \n\t\n#* *:E1\n") == []

    def test_identifier_may_contain_colons(self, parser):
        (rule,) = parser.parse("pci:0000:00:1e.0 2:E1")
        assert rule.identifier_pattern == "pci:0000:00:1e.0"
        assert rule.span_pattern == "2"

    def test_too_many_fields_raises_with_line_number(self, parser):
        with pytest.raises(ConfigParseError) as exc_info:
            parser.parse("* *:T1\nusb:X1 1:E1 2:E1\n", source="span-types.conf")

        assert exc_info.value.line_number == 2
        assert exc_info.value.path == "span-types.conf"
        assert "line=2" in str(exc_info.value)

    def test_single_field_raises(self, parser):
        with pytest.raises(ConfigParseError, match="1 field"):
            parser.parse("usb:X1\n")

    def test_missing_colon_raises(self, parser):
        with pytest.raises(ConfigParseError, match="Bad span specification"):
            parser.parse("* 1E1\n")

    def test_empty_span_pattern_raises(self, parser):
        with pytest.raises(ConfigParseError, match="Bad span specification"):
            parser.parse("* :E1\n")

    @pytest.mark.parametrize("bad_type", ["E2", "e1", "BRI", ""])
    def test_unknown_type_raises(self, parser, bad_type):
        with pytest.raises(ConfigParseError, match="Bad line type"):
            parser.parse(f"* *:{bad_type}\n")

    def test_parse_file(self, parser, tmp_path):
        conf = tmp_path / "span-types.conf"
        conf.write_text(SAMPLE_RULES)

        rules = parser.parse_file(conf)
        assert len(rules) == 4

    def test_parse_file_missing(self, parser, tmp_path):
        with pytest.raises(RuleFileNotFoundError, match="not found") as exc_info:
            parser.parse_file(tmp_path / "missing.conf")
        assert exc_info.value.line_number is None

    def test_parse_file_undecodable_is_not_a_missing_file(self, parser, tmp_path):
        conf = tmp_path / "span-types.conf"
        conf.write_bytes(b"*  *:E1\n\xff\xfe bad\n")

        with pytest.raises(ConfigParseError, match="Cannot read rule file") as exc_info:
            parser.parse_file(conf)
        assert not isinstance(exc_info.value, RuleFileNotFoundError)
        assert exc_info.value.path == str(conf)

    def test_parse_file_reports_path_on_bad_line(self, parser, tmp_path):
        conf = tmp_path / "span-types.conf"
        conf.write_text("* *:T1\n* *:X9\n")

        with pytest.raises(ConfigParseError) as exc_info:
            parser.parse_file(conf)
        assert exc_info.value.path == str(conf)
        assert exc_info.value.line_number == 2
