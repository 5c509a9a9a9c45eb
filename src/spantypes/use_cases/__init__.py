"""Use cases for span type assignment.

Each use case represents a single command and orchestrates
domain logic without knowing about infrastructure details.
"""

from .compare_span_types import CompareSpanTypesUseCase
from .dump_config import DumpConfigUseCase
from .list_spans import ListSpansUseCase, format_span_line
from .set_span_types import SetSpanTypesUseCase

__all__ = [
    "ListSpansUseCase",
    "format_span_line",
    "SetSpanTypesUseCase",
    "CompareSpanTypesUseCase",
    "DumpConfigUseCase",
]
