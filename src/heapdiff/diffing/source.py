#!/usr/bin/env python3
"""
HEAPDIFF LINE SOURCE
--------------------
Reads a dump file lazily as RawLines: trailing newlines stripped,
original order, UTF-8 BOM tolerated. Any I/O problem, including one
raised mid-stream, surfaces as a fatal SourceReadFailure.

Author: HeapDiff Team
Date: 2026-10-19
"""

from pathlib import Path
from typing import Iterator, Union

from heapdiff.core.errors import SourceReadFailure


def read_lines(path: Union[str, Path]) -> Iterator[str]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8-sig", newline=None) as handle:
            for line in handle:
                yield line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadFailure(str(path), str(e)) from e
