"""Rule file parser adapter.

This adapter implements IRuleParser for the line-oriented rule format:

    # comment to end of line
    <identifier-pattern>  <span-pattern>:<E1|T1|J1>

Example:
    *                 *:T1
    usb:X1234567      [34]:E1
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..domain.entities import ASSIGNABLE_TYPES, LineType, Rule
from ..domain.ports import IRuleParser
from ..exceptions import ConfigParseError, RuleFileNotFoundError

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


class TextRuleParser(IRuleParser):
    """Parse rule files into an ordered, immutable rule sequence.

    - Everything from ``#`` to end of line is a comment
    - Blank and whitespace-only lines are skipped
    - Every other line must hold exactly two whitespace-separated fields,
      the second split on its first colon into span pattern and line type
    """

    VALID_TYPES = {t.value for t in ASSIGNABLE_TYPES}

    def parse(self, text: str, source: Optional[str] = None) -> list[Rule]:
        """Parse rule-file text.

        Args:
            text: Raw rule-file content
            source: Optional file name for error messages

        Returns:
            Rules in file order

        Raises:
            ConfigParseError: On the first malformed line
        """
        rules = []
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.split(COMMENT_MARKER, 1)[0].strip()
            if not line:
                continue
            rules.append(self._parse_line(line, line_number, source))

        logger.debug(f"Parsed {len(rules)} rules from {source or '<text>'}")
        return rules

    def parse_file(self, path: Union[str, Path]) -> list[Rule]:
        """Read and parse a rule file.

        Args:
            path: Rule file path

        Returns:
            Rules in file order

        Raises:
            ConfigParseError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise RuleFileNotFoundError(
                f"Rule file not found: {path}", path=str(path), cause=e
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigParseError(
                f"Cannot read rule file {path}: {e}", path=str(path), cause=e
            ) from e

        logger.info(f"Reading rules from {path}")
        return self.parse(text, source=str(path))

    def _parse_line(self, line: str, line_number: int, source: Optional[str]) -> Rule:
        fields = line.split()
        if len(fields) != 2:
            raise ConfigParseError(
                f"Expected '<id> <span>:<type>', got {len(fields)} field(s): {line!r}",
                path=source,
                line_number=line_number,
            )

        identifier_pattern, span_spec = fields
        span_pattern, sep, type_tag = span_spec.partition(":")
        if not sep or not span_pattern:
            raise ConfigParseError(
                f"Bad span specification {span_spec!r} (expected <span>:<type>)",
                path=source,
                line_number=line_number,
            )
        if type_tag not in self.VALID_TYPES:
            raise ConfigParseError(
                f"Bad line type {type_tag!r} (expected one of "
                f"{', '.join(sorted(self.VALID_TYPES))})",
                path=source,
                line_number=line_number,
            )

        return Rule(
            identifier_pattern=identifier_pattern,
            span_pattern=span_pattern,
            target_type=LineType(type_tag),
            line_number=line_number,
        )
