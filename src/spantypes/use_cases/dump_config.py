"""Dump config use case.

Renders the current span types as a rule file:

- If every assignable span has the same type T, emit the wildcard ``* *:T``
  and document each device's spans as commented-out rules.
- If several types are in use, emit no wildcard and make every device rule
  active.
- With a forced default line mode M, emit ``* *:M``; device rules equal to M
  are commented and the rest stay active after the wildcard.

Re-parsing the output and running set against the same devices resolves
every span to its current type.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..domain.entities import Device, GeneratedConfig, IdentifierKey, LineType, Span
from ..domain.matching import escape_pattern
from ..domain.ports import IDeviceStore

logger = logging.getLogger(__name__)

PROGRAM_NAME = "dahdi-span-types"
IDENTIFIER_WIDTH = 30

_UNWRITABLE = re.compile(r"[\s#]")


def format_rule(identifier: str, span: Span, commented: bool = False) -> str:
    line = f"{identifier:<{IDENTIFIER_WIDTH}} {span.number}:{span.current_type}"
    return f"#{line}" if commented else line


def rule_identifier(device: Device, key: IdentifierKey) -> str:
    """Identifier pattern that selects exactly ``device`` in a rule file.

    Starting at ``key``, identifiers containing whitespace or ``#`` are
    skipped since they cannot form a single rule field. Glob
    metacharacters in the chosen one are escaped.
    """
    keys = list(IdentifierKey)
    for candidate_key in keys[keys.index(key):]:
        identifier = device.identifier_for(candidate_key)
        if not _UNWRITABLE.search(identifier):
            return escape_pattern(identifier)
    return escape_pattern(device.path)


class DumpConfigUseCase:
    """Generate a rule file from current device state."""

    def __init__(
        self,
        device_store: IDeviceStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = device_store
        self.clock = clock

    def execute(
        self,
        selection: Optional[Sequence[str]] = None,
        key: IdentifierKey = IdentifierKey.HWID,
        default_line_mode: Optional[LineType] = None,
    ) -> GeneratedConfig:
        """Execute the use case.

        Args:
            selection: Optional device paths or names to restrict to
            key: Preferred identifier for device rules (falls back to path)
            default_line_mode: Force the wildcard to this type

        Returns:
            GeneratedConfig holding the rendered lines
        """
        devices = self.store.enumerate_devices(selection)

        observed: list[LineType] = []
        for device in devices:
            for span in device.eligible_spans:
                if span.current_type not in observed:
                    observed.append(span.current_type)

        if default_line_mode is not None:
            wildcard = default_line_mode
        elif len(observed) == 1:
            wildcard = observed[0]
        else:
            wildcard = None

        logger.debug(
            f"Observed types: {', '.join(str(t) for t in observed) or 'none'}; "
            f"wildcard: {wildcard or 'none'}"
        )

        config = GeneratedConfig(wildcard_type=wildcard, observed_types=observed)
        lines = config.lines
        lines.append(f"# Autogenerated by {PROGRAM_NAME} on {self.clock():%Y-%m-%d %H:%M:%S}")
        lines.append("# Format: <hwid|@location|devpath> <span>:<E1|T1|J1>")
        lines.append("# Patterns may use shell wildcards; the last matching line wins.")

        if wildcard is not None:
            lines.append("#")
            lines.append("# Default line mode for all spans:")
            lines.append(f"* *:{wildcard}")
        elif not observed:
            lines.append("#")
            lines.append("# No E1/T1/J1 spans found.")

        for device in devices:
            lines.extend(self._device_block(device, key, wildcard))

        return config

    def _device_block(
        self,
        device: Device,
        key: IdentifierKey,
        wildcard: Optional[LineType],
    ) -> list[str]:
        spans = device.eligible_spans
        if not spans:
            return []

        identifier = rule_identifier(device, key)
        block = [
            "#",
            f"# Device: [{device.hardware_id or ''}] @{device.location or ''} {device.path}",
        ]
        for span in spans:
            block.append(format_rule(identifier, span, commented=span.current_type == wildcard))
        return block
