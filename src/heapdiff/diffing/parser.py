#!/usr/bin/env python3
"""
HEAPDIFF RECORD PARSER - The Segmenter (Phase 1)
------------------------------------------------
Groups raw dump lines into KeyedRecords, one per object/array block.

The dump format is treated as semi-structured text. Blocks are segmented
by a line-prefix heuristic, not by bracket matching:

    0x1a2b: {              <- opening line: '<address>: {' or '<address>: ['
    x: 1                   <- fields
    }                      <- any line starting with '}' or ']' closes the block
    0x3c4d: []             <- single-line empty block

KNOWN LIMITATION: nested delimiters are not tracked. A field line that
happens to start with '}' or ']' closes the record early. Existing
regression baselines depend on this segmentation, so it is kept as-is.

Author: HeapDiff Team
Date: 2026-10-19
"""

import re
from typing import Iterable, Iterator, List, Optional

from heapdiff.core.errors import MalformedRecord
from heapdiff.core.models import KeyedRecord, KIND_OBJECT, KIND_ARRAY
from heapdiff.diffing.context import DiffContext

CLOSERS = ("}", "]")
OPENERS = {"{": KIND_OBJECT, "[": KIND_ARRAY}


class RecordParser:
    """
    Turns a stream of RawLines into a lazy stream of KeyedRecords.
    Holds at most one accumulating record at a time.
    """

    # Group 1: Address, Group 2: Empty block token
    EMPTY_BLOCK_PATTERN = re.compile(r'^((?:0[xX])?[0-9a-fA-F]+): (\{\}|\[\])$')

    def __init__(self, label: str, context: Optional[DiffContext] = None):
        self.label = label
        self.context = context or DiffContext()
        self._buffer: List[str] = []
        self._buffer_start = 0

    def parse(self, lines: Iterable[str]) -> Iterator[KeyedRecord]:
        """
        Primary interface for the DiffPipeline. One-pass: re-parsing
        requires re-supplying the lines.
        """
        self._reset()

        for line_no, raw_line in enumerate(lines, 1):
            line = raw_line.strip()

            # Padding between records is not part of any block
            if not line and not self._buffer:
                continue

            # --- BOUNDARY 1: single-line empty block ---
            if self.EMPTY_BLOCK_PATTERN.match(line):
                if self._buffer:
                    yield from self._flush()
                yield from self._emit([line], line_no)
                continue

            if not self._buffer:
                self._buffer_start = line_no
            self._buffer.append(line)

            # --- BOUNDARY 2: terminal line ---
            if line[:1] in CLOSERS:
                yield from self._flush()

        # A trailing block without a boundary line is finalized by the same rule
        if self._buffer:
            yield from self._flush()

    def finalize(self, lines: List[str], line_no: int = 0) -> KeyedRecord:
        """
        Validates a buffered block and converts it into a KeyedRecord.
        Raises MalformedRecord when the block cannot be interpreted.
        """
        first = lines[0]

        if self.EMPTY_BLOCK_PATTERN.match(first) and len(lines) == 1:
            key, _, token = first.partition(": ")
            return KeyedRecord(key=key, kind=OPENERS[token[0]], fields=(), line_no=line_no)

        if lines[-1] not in CLOSERS:
            raise MalformedRecord("unrecognized value", lines, line_no)

        colon = first.find(":")
        if colon == -1:
            raise MalformedRecord("missing address", lines, line_no)

        # The opening token sits right after ': '
        opener = first[colon + 2:colon + 3]
        if opener not in OPENERS:
            raise MalformedRecord("unknown type", lines, line_no)

        return KeyedRecord(
            key=first[:colon].strip(),
            kind=OPENERS[opener],
            fields=tuple(lines[1:-1]),
            line_no=line_no,
        )

    def _flush(self) -> Iterator[KeyedRecord]:
        lines, start = self._buffer, self._buffer_start
        self._reset()
        yield from self._emit(lines, start)

    def _emit(self, lines: List[str], line_no: int) -> Iterator[KeyedRecord]:
        try:
            record = self.finalize(lines, line_no)
        except MalformedRecord as e:
            self.context.warn("parser", self.label, e)
            return
        self.context.stats.records_parsed[self.label] += 1
        yield record

    def _reset(self):
        self._buffer = []
        self._buffer_start = 0
