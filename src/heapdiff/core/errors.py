#!/usr/bin/env python3
"""
HEAPDIFF ERRORS
---------------
Exception taxonomy for the join-and-diff engine.

Recoverable errors (MalformedRecord, MalformedJoinInput) never escape the
stage that raised them: they are converted into ParseWarnings on the
DiffContext. Fatal errors propagate and end the run.

Author: HeapDiff Team
Date: 2026-10-19
"""

from typing import Sequence


class HeapDiffError(Exception):
    """Base class for every error raised by HeapDiff."""


class MalformedRecord(HeapDiffError):
    """A buffered dump block failed validation in the Record Parser."""

    def __init__(self, reason: str, lines: Sequence[str] = (), line_no: int = 0):
        super().__init__(f"MalformedRecord: {reason}")
        self.reason = reason
        self.lines = tuple(lines)
        self.line_no = line_no


class MalformedJoinInput(HeapDiffError):
    """A record reached the Key Join without a usable key."""

    def __init__(self, reason: str, record=None):
        super().__init__(f"MalformedJoinInput: {reason}")
        self.reason = reason
        self.record = record


class SourceReadFailure(HeapDiffError):
    """A line source cannot supply further lines. Fatal."""

    def __init__(self, source: str, cause: str):
        super().__init__(f"SourceReadFailure: {source}: {cause}")
        self.source = source
        self.cause = cause


class PolicyInvocationFailure(HeapDiffError):
    """The suppression policy raised while being consulted. Fatal."""


class PolicyLoadError(HeapDiffError):
    """A policy reference could not be resolved into a usable policy."""
