#!/usr/bin/env python3
"""
HEAPDIFF SUPPRESSION POLICY - The Gatekeeper
--------------------------------------------
Decides which addresses and which line-level differences are known,
expected noise between two dumps (address drift, reordered internals,
formatting changes between debugger versions) and should not be reported.

The Diff Engine consults two predicates and passes itself as context:

    ignore_key(engine, key) -> bool
    ignore_line_diff(engine, left_line, right_line) -> bool

Author: HeapDiff Team
Date: 2026-10-19
"""

import re
import logging
from collections import Counter
from typing import Any, Dict, List, Pattern, Tuple

from ruamel.yaml import YAML

logger = logging.getLogger("heapdiff.policy")


class SuppressionPolicy:
    """
    The default policy: suppresses nothing.
    Subclasses override one or both predicates.
    """

    def ignore_key(self, engine: Any, key: str) -> bool:
        return False

    def ignore_line_diff(self, engine: Any, left_line: str, right_line: str) -> bool:
        return False


class RuleBasedPolicy(SuppressionPolicy):
    """
    Suppression driven by a rules document:

        ignore_keys:               # regexes searched in the address
          - '^0xdead'
        ignore_lines:              # suppressed when BOTH lines match one regex
          - '^hash: '
        normalize:                 # suppressed when lines agree after rewriting
          - pattern: '0x[0-9a-f]+'
            replace: '<addr>'

    Tallies every suppression per rule in `hits`.
    """

    def __init__(self, ignore_keys: List[str] = None, ignore_lines: List[str] = None,
                 normalize: List[Dict[str, str]] = None):
        self.key_rules: List[Pattern] = [re.compile(p) for p in (ignore_keys or [])]
        self.line_rules: List[Pattern] = [re.compile(p) for p in (ignore_lines or [])]
        self.rewrites: List[Tuple[Pattern, str]] = [
            (re.compile(rule["pattern"]), str(rule.get("replace", "")))
            for rule in (normalize or [])
        ]
        self.hits: Counter = Counter()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleBasedPolicy":
        if not isinstance(data, dict):
            raise ValueError("Suppression rules must be a mapping at the top level.")

        unknown = set(data) - {"ignore_keys", "ignore_lines", "normalize"}
        if unknown:
            raise ValueError(f"Unknown suppression rule section(s): {', '.join(sorted(unknown))}")

        sections = {}
        for name in ("ignore_keys", "ignore_lines", "normalize"):
            value = data.get(name) or []
            if not isinstance(value, list):
                raise ValueError(f"Section '{name}' must be a list, got {type(value).__name__}.")
            sections[name] = value

        for name in ("ignore_keys", "ignore_lines"):
            for pattern in sections[name]:
                if not isinstance(pattern, str):
                    raise ValueError(f"Patterns in '{name}' must be strings: {pattern!r}")

        for rule in sections["normalize"]:
            if not isinstance(rule, dict) or not isinstance(rule.get("pattern"), str):
                raise ValueError(f"Normalize rule needs a string 'pattern': {rule!r}")
            if not isinstance(rule.get("replace", ""), str):
                raise ValueError(f"Normalize 'replace' must be a string: {rule!r}")

        return cls(
            ignore_keys=list(sections["ignore_keys"]),
            ignore_lines=list(sections["ignore_lines"]),
            normalize=[dict(rule) for rule in sections["normalize"]],
        )

    @classmethod
    def from_yaml(cls, text: str) -> "RuleBasedPolicy":
        yaml = YAML(typ="safe")
        return cls.from_dict(yaml.load(text) or {})

    def ignore_key(self, engine: Any, key: str) -> bool:
        for rule in self.key_rules:
            if rule.search(key):
                self.hits[f"key:{rule.pattern}"] += 1
                return True
        return False

    def ignore_line_diff(self, engine: Any, left_line: str, right_line: str) -> bool:
        # 1. Lines both covered by one volatile-line rule
        for rule in self.line_rules:
            if rule.search(left_line) and rule.search(right_line):
                self.hits[f"line:{rule.pattern}"] += 1
                return True

        # 2. Lines that only differ in rewritten fragments
        if self.rewrites:
            left, right = left_line, right_line
            for pattern, replacement in self.rewrites:
                left = pattern.sub(replacement, left)
                right = pattern.sub(replacement, right)
            if left == right:
                self.hits["normalize"] += 1
                return True

        return False
