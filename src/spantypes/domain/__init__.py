"""Domain layer for span type assignment.

Contains:
- Entities: Core business objects
- Matching: Glob matching and last-match-wins resolution
- Ports: Interface definitions for infrastructure adapters
"""

from .entities import (
    ASSIGNABLE_TYPES,
    CompareResult,
    Device,
    DriftRecord,
    GeneratedConfig,
    IdentifierKey,
    LineType,
    Resolution,
    Rule,
    SetResult,
    Span,
    SpanWriteResult,
    WriteStatus,
)
from .matching import (
    compile_pattern,
    escape_pattern,
    matches,
    resolve,
    resolve_devices,
    span_matches,
)
from .ports import IDeviceStore, IRuleParser

__all__ = [
    # Entities
    "ASSIGNABLE_TYPES",
    "LineType",
    "IdentifierKey",
    "Device",
    "Span",
    "Rule",
    "Resolution",
    "DriftRecord",
    "WriteStatus",
    "SpanWriteResult",
    "SetResult",
    "CompareResult",
    "GeneratedConfig",
    # Matching
    "compile_pattern",
    "escape_pattern",
    "matches",
    "span_matches",
    "resolve",
    "resolve_devices",
    # Ports
    "IDeviceStore",
    "IRuleParser",
]
