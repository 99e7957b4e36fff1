from heapdiff.core.models import KeyedRecord, KIND_OBJECT
from heapdiff.diffing.context import DiffContext
from heapdiff.diffing.joiner import KeyJoin


def rec(key, *fields):
    return KeyedRecord(key=key, kind=KIND_OBJECT, fields=tuple(fields))


def join(left, right):
    context = DiffContext()
    triples = list(KeyJoin(context).join(left, right))
    return triples, context


def shape(triples):
    return [(t.key, t.left is not None, t.right is not None) for t in triples]


def test_identical_keys_pair_up_in_order():
    triples, context = join([rec("a"), rec("b"), rec("c")], [rec("a"), rec("b"), rec("c")])

    assert shape(triples) == [("a", True, True), ("b", True, True), ("c", True, True)]
    assert context.stats.records_joined == 3


def test_triples_follow_first_appearance_order():
    triples, _ = join([rec("a"), rec("b"), rec("d")], [rec("a"), rec("c"), rec("d")])

    assert shape(triples) == [
        ("a", True, True),
        ("b", True, False),
        ("c", False, True),
        ("d", True, True),
    ]


def test_left_only_and_right_only():
    triples, _ = join([rec("a")], [])
    assert shape(triples) == [("a", True, False)]

    triples, _ = join([], [rec("3c4d")])
    assert shape(triples) == [("3c4d", False, True)]


def test_empty_inputs_produce_nothing():
    triples, context = join([], [])
    assert triples == []
    assert context.stats.records_joined == 0


def test_records_after_other_side_drained_are_emitted_immediately():
    triples, _ = join([rec("a")], [rec("x"), rec("a"), rec("y"), rec("z")])

    assert shape(triples) == [
        ("a", True, True),
        ("x", False, True),
        ("y", False, True),
        ("z", False, True),
    ]


def test_duplicate_keys_match_fifo():
    left = [rec("a", "first"), rec("a", "second")]
    right = [rec("a", "one"), rec("a", "two"), rec("a", "three")]
    triples, _ = join(left, right)

    pairs = [(t.left.fields if t.left else None, t.right.fields if t.right else None) for t in triples]
    assert pairs == [
        (("first",), ("one",)),
        (("second",), ("two",)),
        (None, ("three",)),
    ]


def test_keyless_record_is_dropped_with_warning():
    triples, context = join([rec(""), rec("a")], [rec("a")])

    assert shape(triples) == [("a", True, True)]
    assert len(context.warnings) == 1
    assert context.warnings[0].stage == "join"
    assert context.warnings[0].source == "left"
    assert context.warnings[0].reason == "empty key"


def test_join_is_lazy():
    pulled = []

    def source(name, keys):
        for key in keys:
            pulled.append((name, key))
            yield rec(key)

    stream = KeyJoin().join(source("L", ["a", "b"]), source("R", ["a", "b"]))
    first = next(stream)

    assert first.key == "a"
    assert pulled == [("L", "a"), ("R", "a")]


def test_matched_key_waits_behind_unresolved_earlier_key():
    triples, context = join([rec("b"), rec("a")], [rec("a"), rec("c")])

    assert shape(triples) == [
        ("b", True, False),
        ("a", True, True),
        ("c", False, True),
    ]
    assert context.stats.records_joined == 3
