"""List span types use case.

Reports the current type of every assignable span. Pure read: no rules,
no writes.
"""

import logging
from typing import Optional, Sequence

from ..domain.entities import Device, Span
from ..domain.ports import IDeviceStore

logger = logging.getLogger(__name__)


def format_span_line(device: Device, span: Span) -> str:
    """Render one span as ``<span>:<type> [<hwid>] @<location> <path>``."""
    spec = f"{span.number}:{span.current_type}"
    return (
        f"{spec:<6} [{device.hardware_id or ''}] "
        f"@{device.location or ''} {device.path}"
    )


class ListSpansUseCase:
    """List current span types in discovery order."""

    def __init__(self, device_store: IDeviceStore):
        self.store = device_store

    def execute(self, selection: Optional[Sequence[str]] = None) -> list[tuple[Device, Span]]:
        """Return (device, span) pairs for every assignable span.

        Args:
            selection: Optional device paths or names to restrict to
        """
        entries = []
        for device in self.store.enumerate_devices(selection):
            spans = device.eligible_spans
            if not spans:
                logger.debug(f"{device.path}: no E1/T1/J1 spans")
            entries.extend((device, span) for span in spans)
        return entries
