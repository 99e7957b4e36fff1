#!/usr/bin/env python3
"""
HEAPDIFF DIFF ENGINE - The Examiner (Phase 3)
---------------------------------------------
Compares aligned record pairs and emits DiffEntries.

Comparison is positional and textual on purpose: the dump format is not
canonicalized, so line-for-line equality is the only dependable invariant.
Known-benign drift is absorbed by the SuppressionPolicy, never here.

Author: HeapDiff Team
Date: 2026-10-19
"""

import logging
from typing import Any, Iterable, Iterator, Optional

from heapdiff.core.errors import PolicyInvocationFailure
from heapdiff.core.models import (
    AlignedTriple, DiffDetail, DiffEntry,
    DIFF_MISSING, DIFF_TYPE_MISMATCH, DIFF_LINE_MISMATCH, DIFF_LENGTH_MISMATCH,
)
from heapdiff.diffing.context import DiffContext
from heapdiff.rules.policy import SuppressionPolicy

logger = logging.getLogger("heapdiff.differ")


class DiffEngine:
    """
    Applies, per triple: key suppression, presence check, kind check,
    then positional line comparison.
    """

    def __init__(self, policy: Optional[Any] = None, context: Optional[DiffContext] = None):
        self.policy = policy if policy is not None else SuppressionPolicy()
        self.context = context or DiffContext()
        self.left_label = self.context.left_label
        self.right_label = self.context.right_label

    def diff(self, triples: Iterable[AlignedTriple]) -> Iterator[DiffEntry]:
        for triple in triples:
            for entry in self.compare(triple):
                self.context.stats.diffs_emitted[entry.kind] += 1
                yield entry

    def compare(self, triple: AlignedTriple) -> Iterator[DiffEntry]:
        key = triple.key

        # 1. Suppression by key
        if self._ask("ignore_key", key):
            self.context.stats.suppressed_keys += 1
            return

        # 2. Presence
        if triple.left is None or triple.right is None:
            absent = self.left_label if triple.left is None else self.right_label
            yield DiffEntry(key, DIFF_MISSING, (DiffDetail(absent, "missing"),))
            return

        # 3. Kind
        if triple.left.kind != triple.right.kind:
            yield DiffEntry(key, DIFF_TYPE_MISMATCH, (
                DiffDetail(self.left_label, triple.left.kind),
                DiffDetail(self.right_label, triple.right.kind),
            ))
            return

        # 4. Positional line comparison
        left_fields, right_fields = triple.left.fields, triple.right.fields
        for index in range(max(len(left_fields), len(right_fields))):
            line_no = index + 1

            if index >= len(right_fields) or index >= len(left_fields):
                absent = self.right_label if index >= len(right_fields) else self.left_label
                yield DiffEntry(key, DIFF_LENGTH_MISMATCH,
                                (DiffDetail(absent, f"line {line_no} missing"),), line_no)
                continue

            left_line, right_line = left_fields[index], right_fields[index]
            if left_line == right_line:
                continue
            if self._ask("ignore_line_diff", left_line, right_line):
                self.context.stats.suppressed_lines += 1
                continue

            yield DiffEntry(key, DIFF_LINE_MISMATCH, (
                DiffDetail(self.left_label, f"line {line_no}: {left_line}"),
                DiffDetail(self.right_label, f"line {line_no}: {right_line}"),
            ), line_no)

    def _ask(self, predicate: str, *args: str) -> bool:
        """Consults the policy. A failing policy is a bug and ends the run."""
        try:
            return bool(getattr(self.policy, predicate)(self, *args))
        except Exception as e:
            logger.error(f"Suppression policy failed in {predicate}{args!r}: {e}")
            raise PolicyInvocationFailure(f"{predicate} raised {type(e).__name__}: {e}") from e
