#!/usr/bin/env python3
"""
HEAPDIFF POLICY LOADER
----------------------
Resolves a policy reference selected on the command line or by the
caller into a SuppressionPolicy instance.

    None                       -> SuppressionPolicy() (no suppression)
    'rules.yaml' / 'rules.yml' -> RuleBasedPolicy loaded from the file
    'package.module:attribute' -> imported object; classes are instantiated

Author: HeapDiff Team
Date: 2026-10-19
"""

import importlib
import re
import logging
from pathlib import Path
from typing import Any, Optional

from ruamel.yaml import YAMLError

from heapdiff.core.errors import PolicyLoadError
from heapdiff.rules.policy import SuppressionPolicy, RuleBasedPolicy

logger = logging.getLogger("heapdiff.loader")

YAML_SUFFIXES = (".yaml", ".yml")


def load_policy(ref: Optional[Any] = None) -> Any:
    if ref is None:
        return SuppressionPolicy()

    # Already a policy object
    if not isinstance(ref, (str, Path)):
        return _check_policy(ref, repr(ref))

    ref = str(ref)
    if ref.lower().endswith(YAML_SUFFIXES):
        return _load_rules_file(Path(ref))
    if ":" in ref:
        return _import_policy(ref)

    raise PolicyLoadError(f"Unrecognized policy reference '{ref}'. Expected a .yaml file or 'module:attribute'.")


def _load_rules_file(path: Path) -> RuleBasedPolicy:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise PolicyLoadError(f"Unable to read suppression rules {path}: {e}") from e

    try:
        policy = RuleBasedPolicy.from_yaml(text)
    except (YAMLError, re.error, ValueError) as e:
        raise PolicyLoadError(f"Invalid suppression rules in {path}: {e}") from e

    logger.info(f"Loaded suppression rules from {path}")
    return policy


def _import_policy(ref: str) -> Any:
    module_name, _, attr = ref.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise PolicyLoadError(f"Unable to import policy module '{module_name}': {e}") from e

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise PolicyLoadError(f"Policy '{ref}' not found: {e}") from e

    if isinstance(target, type):
        target = target()

    logger.info(f"Loaded suppression policy {ref}")
    return _check_policy(target, ref)


def _check_policy(policy: Any, ref: str) -> Any:
    for predicate in ("ignore_key", "ignore_line_diff"):
        if not callable(getattr(policy, predicate, None)):
            raise PolicyLoadError(f"Policy '{ref}' does not implement {predicate}().")
    return policy
