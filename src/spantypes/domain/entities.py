"""Domain entities for span type assignment.

These are pure domain objects with no infrastructure dependencies.
Devices and spans are immutable snapshots taken once per run; resolutions,
drift records and write results are derived per action and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LineType(str, Enum):
    """Line-protocol modes a span can be configured to before activation."""

    E1 = "E1"
    T1 = "T1"
    J1 = "J1"
    OTHER = "Other"  # BRI, FXS/FXO modules, anything we must not touch

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "LineType":
        """Map a raw driver tag to a LineType (unknown tags become OTHER)."""
        if tag is None:
            return cls.OTHER
        tag = tag.strip()
        for member in (cls.E1, cls.T1, cls.J1):
            if member.value == tag:
                return member
        return cls.OTHER

    @property
    def is_assignable(self) -> bool:
        return self is not LineType.OTHER

    def __str__(self) -> str:
        return self.value


ASSIGNABLE_TYPES = (LineType.E1, LineType.T1, LineType.J1)


class IdentifierKey(str, Enum):
    """Which device identifier dumpconfig prefers when rendering rules."""

    HWID = "hwid"
    LOCATION = "location"
    PATH = "path"


@dataclass(frozen=True)
class Span:
    """One communication line on a device, individually typed."""

    number: int
    current_type: LineType

    @property
    def is_assignable(self) -> bool:
        return self.current_type.is_assignable


@dataclass(frozen=True)
class Device:
    """A device exposed by the driver, with its identifier triple.

    ``path`` is always present and unique; ``hardware_id`` and ``location``
    may be missing (None or empty) depending on the driver.
    """

    path: str
    hardware_id: Optional[str] = None
    location: Optional[str] = None
    spans: tuple[Span, ...] = ()

    @property
    def name(self) -> str:
        """Last path component (e.g. ``astribanks:xbus-00``)."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def eligible_spans(self) -> list[Span]:
        """Spans whose current type is E1, T1 or J1, in discovery order."""
        return [s for s in self.spans if s.is_assignable]

    def candidate_identifiers(self) -> list[str]:
        """Identifier strings tried against rule patterns during resolution.

        Order: hardware id (if present), ``@`` + location (if present), path.
        """
        candidates = []
        if self.hardware_id:
            candidates.append(self.hardware_id)
        if self.location:
            candidates.append(f"@{self.location}")
        candidates.append(self.path)
        return candidates

    def identifier_for(self, key: IdentifierKey) -> str:
        """Identifier used when rendering a rule for this device.

        Preference falls back along hwid -> location -> path starting at
        ``key``; path always exists so this never fails.
        """
        if key is IdentifierKey.HWID and self.hardware_id:
            return self.hardware_id
        if key in (IdentifierKey.HWID, IdentifierKey.LOCATION) and self.location:
            return f"@{self.location}"
        return self.path


@dataclass(frozen=True)
class Rule:
    """One parsed rule-file entry. Position in the sequence is its precedence."""

    identifier_pattern: str
    span_pattern: str
    target_type: LineType
    line_number: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.identifier_pattern} {self.span_pattern}:{self.target_type}"


@dataclass
class Resolution:
    """The rule-resolved type for a span (None when no rule matched)."""

    device: Device
    span: Span
    resolved_type: Optional[LineType] = None


@dataclass
class DriftRecord:
    """A span whose live type disagrees with the configured type."""

    device: Device
    span: Span
    configured_type: LineType
    live_type: LineType

    def __str__(self) -> str:
        return (
            f"{self.device.path} span {self.span.number}: "
            f"configured={self.configured_type} live={self.live_type}"
        )


class WriteStatus(str, Enum):
    """Outcome of the set action for a single span."""

    APPLIED = "applied"
    WOULD_APPLY = "would_apply"  # dry run
    UNCHANGED = "unchanged"  # resolved type already active
    UNMATCHED = "unmatched"  # no rule matched, span left untouched
    FAILED = "failed"


@dataclass
class SpanWriteResult:
    """Per-span outcome of the set action."""

    device: Device
    span: Span
    status: WriteStatus
    target_type: Optional[LineType] = None
    detail: str = ""


@dataclass
class SetResult:
    """Result of applying resolved types to all scoped devices."""

    results: list[SpanWriteResult] = field(default_factory=list)
    dry_run: bool = False

    def count(self, status: WriteStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def failures(self) -> list[SpanWriteResult]:
        return [r for r in self.results if r.status == WriteStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.failures


@dataclass
class CompareResult:
    """Result of comparing configured types against live span state."""

    drift: list[DriftRecord] = field(default_factory=list)
    spans_checked: int = 0
    spans_unmatched: int = 0

    @property
    def has_drift(self) -> bool:
        return bool(self.drift)


@dataclass
class GeneratedConfig:
    """A rule file rendered from current device state."""

    lines: list[str] = field(default_factory=list)
    wildcard_type: Optional[LineType] = None
    observed_types: list[LineType] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"
