"""Span Type Assignment Module.

This module assigns a line-protocol mode (E1, T1 or J1) to each span of the
telephony driver's devices before the spans are activated:
- Parse a rule file mapping device identifiers (with wildcards) to span types
- Resolve each span with last-match-wins precedence
- List, set, compare (drift detection) and dump current state as rules

Architecture: Clean Architecture with Hexagonal (Ports & Adapters)
"""
