"""Rule matching and resolution.

Patterns use shell glob syntax, compiled to anchored regular expressions:

    *       any string, including the empty string
    ?       exactly one character
    [...]   character class; ``[!...]`` or ``[^...]`` negates, ``a-z`` ranges
    other   literal (an unterminated ``[`` is a literal bracket)

Matching is case-sensitive. Unlike ``fnmatch``, ``*`` and ``?`` also match
``/`` since patterns are applied to device identifiers, not file names.

Span patterns are matched against the decimal form of the span number, so
``[34]`` means spans 3 and 4, not a numeric range.
"""

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional, Sequence

from .entities import Device, LineType, Resolution, Rule, Span

logger = logging.getLogger(__name__)


def _translate_class(pattern: str, start: int) -> tuple[Optional[str], int]:
    """Translate a ``[...]`` class beginning at ``pattern[start] == "["``.

    Returns (regex, index after the class), or (None, start) when the
    bracket is unterminated and must be taken literally.
    """
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1
    # A "]" directly after the opening (or negation) is a member, not the end
    members_start = i
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern) and pattern[i] != "]":
        i += 1
    if i >= len(pattern):
        return None, start

    body = pattern[members_start:i]
    parts = []
    j = 0
    while j < len(body):
        if j + 2 < len(body) and body[j + 1] == "-":
            low, high = body[j], body[j + 2]
            if low <= high:
                parts.append(f"{re.escape(low)}-{re.escape(high)}")
            j += 3
        else:
            parts.append(re.escape(body[j]))
            j += 1

    if not parts:
        # Only reversed ranges: the class matches nothing (or anything if negated)
        return ("." if negate else "(?!)"), i + 1
    prefix = "^" if negate else ""
    return f"[{prefix}{''.join(parts)}]", i + 1


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a glob pattern into an anchored, case-sensitive regex."""
    out = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            # Collapse runs of "*"
            while i + 1 < len(pattern) and pattern[i + 1] == "*":
                i += 1
            out.append(".*")
            i += 1
        elif char == "?":
            out.append(".")
            i += 1
        elif char == "[":
            regex, i_next = _translate_class(pattern, i)
            if regex is None:
                out.append(re.escape(char))
                i += 1
            else:
                out.append(regex)
                i = i_next
        else:
            out.append(re.escape(char))
            i += 1
    return re.compile("".join(out), re.DOTALL)


def matches(pattern: str, value: str) -> bool:
    """Return True if ``value`` matches the glob ``pattern`` in full."""
    return compile_pattern(pattern).fullmatch(value) is not None


def span_matches(pattern: str, span_number: int) -> bool:
    """Match a span pattern against the decimal form of a span number."""
    return matches(pattern, str(span_number))


GLOB_METACHARACTERS = "*?["


def escape_pattern(value: str) -> str:
    """Escape ``value`` so that, as a glob pattern, it matches only itself."""
    return "".join(f"[{c}]" if c in GLOB_METACHARACTERS else c for c in value)


def resolve(rules: Iterable[Rule], device: Device, span: Span) -> Optional[LineType]:
    """Resolve the configured type of one span.

    Every rule is scanned in order and each full match overwrites the
    previous result, so the last matching rule wins. A rule matches when the
    span number matches its span pattern and any of the device's candidate
    identifiers (hardware id, ``@location``, path) matches its identifier
    pattern.

    Args:
        rules: Rules in file order
        device: Device owning the span
        span: The span to resolve

    Returns:
        The resolved LineType, or None if no rule matched or the span is not
        assignable
    """
    if not span.is_assignable:
        return None

    candidates = device.candidate_identifiers()
    result: Optional[LineType] = None

    for rule in rules:
        if not span_matches(rule.span_pattern, span.number):
            continue
        if any(matches(rule.identifier_pattern, c) for c in candidates):
            logger.debug(
                f"{device.path} span {span.number}: matched '{rule}'"
                + (f" (line {rule.line_number})" if rule.line_number else "")
            )
            result = rule.target_type

    return result


def resolve_devices(rules: Sequence[Rule], devices: Iterable[Device]) -> list[Resolution]:
    """Resolve every assignable span of ``devices`` in discovery order."""
    resolutions = []
    for device in devices:
        for span in device.eligible_spans:
            resolved = resolve(rules, device, span)
            if resolved is None:
                logger.debug(f"{device.path} span {span.number}: no matching rule")
            resolutions.append(Resolution(device=device, span=span, resolved_type=resolved))
    return resolutions
