import sys
import types

import pytest

from heapdiff.core.errors import PolicyLoadError
from heapdiff.rules.loader import load_policy
from heapdiff.rules.policy import SuppressionPolicy, RuleBasedPolicy

RULES = """
ignore_keys:
  - '^0xdead'
ignore_lines:
  - '^timestamp: '
normalize:
  - pattern: '0x[0-9a-f]+'
    replace: '<addr>'
"""


def test_default_policy_suppresses_nothing():
    policy = SuppressionPolicy()
    assert policy.ignore_key(None, "1a2b") is False
    assert policy.ignore_line_diff(None, "x: 1", "x: 2") is False


def test_rules_from_yaml():
    policy = RuleBasedPolicy.from_yaml(RULES)

    assert policy.ignore_key(None, "0xdeadbeef")
    assert not policy.ignore_key(None, "0x1a2b")

    assert policy.ignore_line_diff(None, "timestamp: 1", "timestamp: 2")
    assert policy.ignore_line_diff(None, "next: 0x1a2b", "next: 0x9f00")
    assert not policy.ignore_line_diff(None, "x: 1", "x: 2")

    assert policy.hits["key:^0xdead"] == 1
    assert policy.hits["line:^timestamp: "] == 1
    assert policy.hits["normalize"] == 1


def test_line_rule_needs_both_sides_to_match():
    policy = RuleBasedPolicy(ignore_lines=["^timestamp: "])
    assert not policy.ignore_line_diff(None, "timestamp: 1", "x: 1")


def test_empty_rules_document():
    policy = RuleBasedPolicy.from_yaml("")
    assert not policy.ignore_key(None, "1a2b")


@pytest.mark.parametrize("document", [
    "ignore_addresses: ['x']",
    "- just a list",
    "normalize:\n  - replace: 'x'",
    "ignore_keys: '^0xdead'",
    "ignore_lines: '^hash: '",
    "ignore_keys:\n  - 5",
    "normalize:\n  - pattern: 5",
    "normalize:\n  - pattern: 'x'\n    replace: [1]",
    "normalize: {pattern: 'x'}",
])
def test_invalid_rules_rejected(document):
    with pytest.raises(ValueError):
        RuleBasedPolicy.from_yaml(document)


def test_load_none_gives_default():
    assert type(load_policy(None)) is SuppressionPolicy


def test_load_yaml_file(tmp_path):
    rules = tmp_path / "suppress.yaml"
    rules.write_text(RULES)

    policy = load_policy(str(rules))
    assert isinstance(policy, RuleBasedPolicy)
    assert policy.ignore_key(None, "0xdead")


def test_load_bad_yaml_file(tmp_path):
    rules = tmp_path / "broken.yml"
    rules.write_text("ignore_keys:\n  - '('\n")

    with pytest.raises(PolicyLoadError):
        load_policy(rules)


def test_load_rules_file_with_scalar_section(tmp_path):
    rules = tmp_path / "scalar.yaml"
    rules.write_text("ignore_keys: '^0xdead'\n")

    with pytest.raises(PolicyLoadError):
        load_policy(rules)


def test_load_missing_yaml_file(tmp_path):
    with pytest.raises(PolicyLoadError):
        load_policy(tmp_path / "absent.yaml")


def test_load_import_reference(monkeypatch):
    module = types.ModuleType("heapdiff_test_policies")

    class IgnoreEverything(SuppressionPolicy):
        def ignore_key(self, engine, key):
            return True

    module.IgnoreEverything = IgnoreEverything
    module.not_a_policy = object()
    monkeypatch.setitem(sys.modules, "heapdiff_test_policies", module)

    policy = load_policy("heapdiff_test_policies:IgnoreEverything")
    assert policy.ignore_key(None, "anything")

    with pytest.raises(PolicyLoadError):
        load_policy("heapdiff_test_policies:not_a_policy")
    with pytest.raises(PolicyLoadError):
        load_policy("heapdiff_test_policies:Missing")


@pytest.mark.parametrize("ref", ["no_such_module_xyz:Policy", "plainname"])
def test_load_rejects_bad_references(ref):
    with pytest.raises(PolicyLoadError):
        load_policy(ref)


def test_load_accepts_policy_object():
    policy = RuleBasedPolicy()
    assert load_policy(policy) is policy
