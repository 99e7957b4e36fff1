#!/usr/bin/env python3
"""
HEAPDIFF KEY JOIN - The Matchmaker (Phase 2)
--------------------------------------------
Aligns two streams of KeyedRecords by address into AlignedTriples.

Both sources are pulled round-robin, left first. Every key occurrence
that finds no open slot gets a new slot at the tail of a queue, so the
queue is in the order keys first appear across the two inputs. A record
from the other side fills the oldest open slot for its key (FIFO per key).
Triples are released from the head of the queue once the head slot is
resolved: both sides filled, or the missing side drained.

Author: HeapDiff Team
Date: 2026-10-19
"""

from collections import deque
from typing import Deque, Dict, Iterable, Iterator, List, Optional

from heapdiff.core.errors import MalformedJoinInput
from heapdiff.core.models import AlignedTriple, KeyedRecord
from heapdiff.diffing.context import DiffContext

LEFT = 0
RIGHT = 1


class KeyJoin:
    """Order-preserving equi-join of two keyed record streams."""

    def __init__(self, context: Optional[DiffContext] = None):
        self.context = context or DiffContext()
        self.labels = (self.context.left_label, self.context.right_label)

    def join(self, left: Iterable[KeyedRecord], right: Iterable[KeyedRecord]) -> Iterator[AlignedTriple]:
        sources = [iter(left), iter(right)]
        drained = [False, False]

        # Slot layout: [key, left_record, right_record]
        queue: Deque[list] = deque()
        # open_slots[side][key]: slots still waiting for a record from `side`
        open_slots: List[Dict[str, Deque[list]]] = [{}, {}]

        while not all(drained):
            for side in (LEFT, RIGHT):
                if drained[side]:
                    continue
                other = 1 - side

                try:
                    record = next(sources[side])
                except StopIteration:
                    drained[side] = True
                    # Nothing will ever fill these
                    open_slots[side].clear()
                    yield from self._release(queue, drained)
                    continue

                if not self._has_key(record, side):
                    continue

                waiting = open_slots[side].get(record.key)
                if waiting:
                    slot = waiting.popleft()
                    if not waiting:
                        del open_slots[side][record.key]
                else:
                    slot = [record.key, None, None]
                    queue.append(slot)
                    if not drained[other]:
                        open_slots[other].setdefault(record.key, deque()).append(slot)
                slot[1 + side] = record

                yield from self._release(queue, drained)

    def _has_key(self, record: KeyedRecord, side: int) -> bool:
        if record is None or not getattr(record, "key", None):
            self.context.warn("join", self.labels[side], MalformedJoinInput("empty key", record))
            return False
        return True

    def _release(self, queue: Deque[list], drained: List[bool]) -> Iterator[AlignedTriple]:
        """Emits resolved slots from the head; stops at the first unresolved one."""
        while queue:
            key, left, right = queue[0]
            if (left is None and not drained[LEFT]) or (right is None and not drained[RIGHT]):
                return
            queue.popleft()
            self.context.stats.records_joined += 1
            yield AlignedTriple(key=key, left=left, right=right)
