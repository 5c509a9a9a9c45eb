"""Set span types use case.

Applies the rule-resolved type to every assignable span. This must run
before spans are assigned; the driver refuses type changes afterwards.
"""

import logging
from typing import Optional, Sequence

from ..domain.entities import Rule, SetResult, SpanWriteResult, WriteStatus
from ..domain.matching import resolve_devices
from ..domain.ports import IDeviceStore
from ..exceptions import DeviceWriteError

logger = logging.getLogger(__name__)


class SetSpanTypesUseCase:
    """Resolve and write span types, one span at a time.

    A rejected write is recorded as FAILED and the run moves on to the next
    span, so one locked span does not block the rest.

    Example:
        use_case = SetSpanTypesUseCase(
            device_store=SysfsDeviceStore(),
            rules=TextRuleParser().parse_file("/etc/dahdi/span-types.conf"),
        )
        result = use_case.execute(dry_run=True)
    """

    def __init__(self, device_store: IDeviceStore, rules: Sequence[Rule]):
        """Initialize the use case.

        Args:
            device_store: Port for reading and writing span attributes
            rules: Parsed rules in file order
        """
        self.store = device_store
        self.rules = tuple(rules)

    def execute(
        self,
        selection: Optional[Sequence[str]] = None,
        dry_run: bool = False,
    ) -> SetResult:
        """Execute the use case.

        Args:
            selection: Optional device paths or names to restrict to
            dry_run: Compute and report resolutions without writing

        Returns:
            SetResult with one entry per assignable span
        """
        devices = self.store.enumerate_devices(selection)
        result = SetResult(dry_run=dry_run)

        for resolution in resolve_devices(self.rules, devices):
            device, span, target = resolution.device, resolution.span, resolution.resolved_type

            if target is None:
                result.results.append(
                    SpanWriteResult(device=device, span=span, status=WriteStatus.UNMATCHED)
                )
                continue

            if target == span.current_type:
                logger.debug(f"{device.path} span {span.number}: already {target}")
                result.results.append(
                    SpanWriteResult(
                        device=device, span=span, status=WriteStatus.UNCHANGED, target_type=target
                    )
                )
                continue

            if dry_run:
                logger.info(
                    f"[dry-run] {device.path} span {span.number}: {span.current_type} -> {target}"
                )
                result.results.append(
                    SpanWriteResult(
                        device=device, span=span, status=WriteStatus.WOULD_APPLY, target_type=target
                    )
                )
                continue

            try:
                self.store.write_span_type(device, span.number, target)
            except DeviceWriteError as e:
                logger.error(f"{device.path} span {span.number}: {e.message}")
                result.results.append(
                    SpanWriteResult(
                        device=device,
                        span=span,
                        status=WriteStatus.FAILED,
                        target_type=target,
                        detail=e.message,
                    )
                )
                continue

            logger.info(f"{device.path} span {span.number}: {span.current_type} -> {target}")
            result.results.append(
                SpanWriteResult(
                    device=device, span=span, status=WriteStatus.APPLIED, target_type=target
                )
            )

        logger.info(
            f"Set complete: {result.count(WriteStatus.APPLIED)} applied, "
            f"{result.count(WriteStatus.WOULD_APPLY)} would apply, "
            f"{result.count(WriteStatus.UNCHANGED)} unchanged, "
            f"{result.count(WriteStatus.UNMATCHED)} unmatched, "
            f"{len(result.failures)} failed"
        )
        return result
