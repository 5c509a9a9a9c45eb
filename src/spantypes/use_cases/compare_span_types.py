"""Compare span types use case.

Same traversal as set, but read-only: reports every span whose live type
differs from the type the rules resolve to.
"""

import logging
from typing import Optional, Sequence

from ..domain.entities import CompareResult, DriftRecord, Rule
from ..domain.matching import resolve_devices
from ..domain.ports import IDeviceStore

logger = logging.getLogger(__name__)


class CompareSpanTypesUseCase:
    """Detect drift between configured and live span types."""

    def __init__(self, device_store: IDeviceStore, rules: Sequence[Rule]):
        self.store = device_store
        self.rules = tuple(rules)

    def execute(self, selection: Optional[Sequence[str]] = None) -> CompareResult:
        """Compare every resolved span against a fresh read of its type.

        Spans no rule matches are counted as unmatched, not as drift.
        """
        devices = self.store.enumerate_devices(selection)
        result = CompareResult()

        for resolution in resolve_devices(self.rules, devices):
            if resolution.resolved_type is None:
                result.spans_unmatched += 1
                continue

            result.spans_checked += 1
            live = self.store.read_span_type(resolution.device, resolution.span.number)
            if live != resolution.resolved_type:
                record = DriftRecord(
                    device=resolution.device,
                    span=resolution.span,
                    configured_type=resolution.resolved_type,
                    live_type=live,
                )
                logger.debug(f"Drift: {record}")
                result.drift.append(record)

        logger.info(
            f"Compared {result.spans_checked} span(s): {len(result.drift)} drifted, "
            f"{result.spans_unmatched} unmatched"
        )
        return result
