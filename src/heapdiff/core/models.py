#!/usr/bin/env python3
"""
HEAPDIFF CORE MODELS
--------------------
Defines the fundamental data structures used across the HeapDiff engine.
These models represent the lowest level of heap-dump abstraction: the
parsed record, the aligned pair, and the reportable difference.

Author: HeapDiff Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

# Record kinds, derived from the opening token of a dump block
KIND_OBJECT = "object"
KIND_ARRAY = "array"

# DiffEntry kinds
DIFF_MISSING = "missing"
DIFF_TYPE_MISMATCH = "type-mismatch"
DIFF_LINE_MISMATCH = "line-mismatch"
DIFF_LENGTH_MISMATCH = "length-mismatch"

DIFF_KINDS = (DIFF_MISSING, DIFF_TYPE_MISMATCH, DIFF_LINE_MISMATCH, DIFF_LENGTH_MISMATCH)


@dataclass(frozen=True)
class KeyedRecord:
    """
    The atomic unit of a heap dump.

    A KeyedRecord represents one object or array block extracted from the
    raw dump text, identified by the address on its opening line.
    """
    key: str                              # Address-like token (e.g. '0x1a2b')
    kind: str                             # KIND_OBJECT or KIND_ARRAY
    fields: Tuple[str, ...] = ()          # Body lines, original order, closer excluded
    line_no: int = 0                      # Line number of the opening line in its source


@dataclass(frozen=True)
class AlignedTriple:
    """A key with zero-or-one record from each side. Never both absent."""
    key: str
    left: Optional[KeyedRecord] = None
    right: Optional[KeyedRecord] = None

    def __post_init__(self):
        if self.left is None and self.right is None:
            raise ValueError(f"AlignedTriple for '{self.key}' has no records on either side")


@dataclass(frozen=True)
class DiffDetail:
    label: str
    message: str


@dataclass(frozen=True)
class DiffEntry:
    """
    One reportable difference between two aligned records.

    Rendered by the formatter as '<key>: <label>: <message>' per detail,
    or '<key>: <message>' when a detail carries no label.
    """
    key: str
    kind: str
    detail: Tuple[DiffDetail, ...] = field(default_factory=tuple)
    line_no: Optional[int] = None         # 1-based field index for line-level diffs


@dataclass(frozen=True)
class ParseWarning:
    """A recoverable problem reported through the side channel."""
    stage: str                            # 'parser' or 'join'
    source: str                           # Label of the offending source
    reason: str                           # Human-readable error message
    line_no: int = 0                      # Opening line of the offending block
    content: Tuple[str, ...] = ()         # Raw lines of the offending block
