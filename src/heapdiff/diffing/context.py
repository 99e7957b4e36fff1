#!/usr/bin/env python3
"""
HEAPDIFF DIFF CONTEXT
---------------------
A state-management object that acts as the run record for one comparison.
It carries the counters every stage updates and the side channel of
recoverable warnings (malformed records, keyless join input).

Author: HeapDiff Team
Date: 2026-10-19
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Any, List

from heapdiff.core.errors import MalformedRecord, MalformedJoinInput
from heapdiff.core.models import ParseWarning, DIFF_KINDS

logger = logging.getLogger("heapdiff.context")


@dataclass
class DiffStats:
    records_parsed: Counter = field(default_factory=Counter)   # Per source label
    records_joined: int = 0
    diffs_emitted: Counter = field(default_factory=Counter)    # Per DiffEntry kind
    warnings: int = 0
    suppressed_keys: int = 0
    suppressed_lines: int = 0


@dataclass
class DiffContext:
    """
    Maintains the state of a single comparison session.

    Created by the DiffPipeline and enriched by the Record Parsers, the
    Key Join and the Diff Engine as the run progresses.
    """
    left_label: str = "left"
    right_label: str = "right"
    stats: DiffStats = field(default_factory=DiffStats)
    warnings: List[ParseWarning] = field(default_factory=list)

    def warn(self, stage: str, source: str, error: Exception) -> ParseWarning:
        """Records a recoverable error and logs it. Never raises."""
        if isinstance(error, MalformedRecord):
            warning = ParseWarning(stage, source, error.reason, error.line_no, error.lines)
        elif isinstance(error, MalformedJoinInput) and error.record is not None:
            record = error.record
            warning = ParseWarning(stage, source, error.reason, record.line_no,
                                   (f"{record.key}: {record.kind}",) + tuple(record.fields))
        else:
            warning = ParseWarning(stage, source, str(error))

        self.warnings.append(warning)
        self.stats.warnings += 1
        logger.warning(f"{source}:{warning.line_no}: {error}")
        return warning

    def summary(self) -> Dict[str, Any]:
        """Counts for the external report formatter."""
        return {
            "records_parsed": {
                self.left_label: self.stats.records_parsed[self.left_label],
                self.right_label: self.stats.records_parsed[self.right_label],
            },
            "records_joined": self.stats.records_joined,
            "diffs_emitted": sum(self.stats.diffs_emitted.values()),
            "diffs_by_kind": {kind: self.stats.diffs_emitted[kind] for kind in DIFF_KINDS},
            "warnings": self.stats.warnings,
            "suppressed_keys": self.stats.suppressed_keys,
            "suppressed_lines": self.stats.suppressed_lines,
        }
