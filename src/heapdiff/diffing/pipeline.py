#!/usr/bin/env python3
"""
HEAPDIFF DIFF PIPELINE - The Conductor
--------------------------------------
Central coordinator for one comparison. It chains the stages lazily in a
strict order so that each record travels the whole pipeline before the
next one is read:

    RawLines --> RecordParser (x2) --> KeyJoin --> DiffEngine --> DiffEntries

No stage buffers a whole input. The parser holds one block, the join
holds unmatched records only, and the diff engine holds nothing between
triples.

Author: HeapDiff Team
Date: 2026-10-19
"""

from typing import Any, Iterable, Iterator, Optional

from heapdiff.core.models import DiffEntry
from heapdiff.diffing.context import DiffContext
from heapdiff.diffing.differ import DiffEngine
from heapdiff.diffing.joiner import KeyJoin
from heapdiff.diffing.parser import RecordParser


class DiffPipeline:
    """
    The Orchestrator: wires parsing, joining and diffing around a
    shared DiffContext.
    """

    def __init__(self, policy: Optional[Any] = None,
                 left_label: str = "left", right_label: str = "right"):
        """
        Args:
            policy: SuppressionPolicy-like object, or None for no suppression.
            left_label / right_label: Source names used verbatim in DiffEntries.
        """
        if left_label == right_label:
            raise ValueError(f"Source labels must differ, got '{left_label}' twice.")
        self.policy = policy
        self.left_label = left_label
        self.right_label = right_label
        self.context = DiffContext(left_label=left_label, right_label=right_label)

    def run(self, left_lines: Iterable[str], right_lines: Iterable[str]) -> Iterator[DiffEntry]:
        """
        Returns a lazy DiffEntry stream. Each call starts a fresh DiffContext,
        available as `self.context` once the stream is consumed.
        """
        self.context = DiffContext(left_label=self.left_label, right_label=self.right_label)

        # --- PHASE 1: SEGMENTATION ---
        left_records = RecordParser(self.left_label, self.context).parse(left_lines)
        right_records = RecordParser(self.right_label, self.context).parse(right_lines)

        # --- PHASE 2: ALIGNMENT ---
        triples = KeyJoin(self.context).join(left_records, right_records)

        # --- PHASE 3: EXAMINATION ---
        return DiffEngine(self.policy, self.context).diff(triples)
