#!/usr/bin/env python3
"""
HEAPDIFF ENGINE - The High Orchestrator
---------------------------------------
CompareEngine manages dump comparisons end to end: it resolves
the suppression policy, opens both dump files lazily, drives the
DiffPipeline and produces a report with the counts a summary needs.

Author: HeapDiff Team
Date: 2026-10-19
"""

import time
import logging
from pathlib import Path
from typing import Dict, Any, Callable, Iterable, Iterator, Optional, Union

from heapdiff.core.errors import SourceReadFailure, PolicyInvocationFailure
from heapdiff.core.models import DiffEntry
from heapdiff.diffing.pipeline import DiffPipeline
from heapdiff.diffing.source import read_lines
from heapdiff.rules.loader import load_policy

logger = logging.getLogger("heapdiff.engine")


class CompareEngine:
    """
    Principal orchestrator for heap dump comparison.
    Owns the policy for the lifetime of the engine; each comparison gets
    its own pipeline and DiffContext.
    """

    def __init__(self, policy: Optional[Any] = None,
                 left_label: Optional[str] = None, right_label: Optional[str] = None):
        """
        Args:
            policy: A policy object, a rules .yaml path, a 'module:attribute'
                    reference, or None for no suppression.
            left_label / right_label: Fixed source names. When omitted the
                    file paths given to compare_files() are used.
        """
        self.policy = load_policy(policy)
        self.left_label = left_label
        self.right_label = right_label
        self.last_pipeline: Optional[DiffPipeline] = None

    def iter_diffs(self, left_lines: Iterable[str], right_lines: Iterable[str],
                   left_label: str = "left", right_label: str = "right") -> Iterator[DiffEntry]:
        """Streams DiffEntries for two in-memory or lazily read line sources."""
        pipeline = DiffPipeline(self.policy, left_label, right_label)
        self.last_pipeline = pipeline
        return pipeline.run(left_lines, right_lines)

    def compare_files(self, left_path: Union[str, Path], right_path: Union[str, Path],
                      on_entry: Optional[Callable[[DiffEntry], None]] = None) -> Dict[str, Any]:
        """
        Performs a full comparison of two dump files.
        on_entry, when given, sees every DiffEntry as soon as it is produced.
        Fatal errors are logged and re-raised; no partial report is returned.
        """
        left_label = self.left_label or str(left_path)
        right_label = self.right_label or str(right_path)
        if left_label == right_label:
            left_label, right_label = "left", "right"
        started = time.time()

        try:
            entries = []
            for entry in self.iter_diffs(read_lines(left_path), read_lines(right_path),
                                         left_label, right_label):
                entries.append(entry)
                if on_entry:
                    on_entry(entry)
        except SourceReadFailure as e:
            logger.error(f"Aborting comparison: {e}")
            raise
        except PolicyInvocationFailure as e:
            logger.error(f"Aborting comparison, suppression policy failed: {e}")
            raise

        context = self.last_pipeline.context
        return {
            "left": left_label,
            "right": right_label,
            "entries": entries,
            "warnings": list(context.warnings),
            "identical": not entries,
            "summary": context.summary(),
            "elapsed": time.time() - started,
        }
