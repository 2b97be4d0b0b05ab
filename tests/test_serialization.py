"""Tests for saving and loading the text form of a tree."""

import io

import pytest

from incremental_tree import FeatureVector, IncrementalTreeClassifier
from incremental_tree import InvalidArgumentError, ParseError
from incremental_tree.dtree import DecisionNode, LeafNode


def weight(value: float) -> FeatureVector:
    return FeatureVector({"weight": value})


def _grid(n: int = 6):
    return [
        FeatureVector({"x": x / 2, "y": y / 3})
        for x in range(-2, 2 * n)
        for y in range(-2, 3 * n)
    ]


@pytest.fixture
def xy_tree() -> IncrementalTreeClassifier:
    data = [
        FeatureVector({"x": 0.1, "y": 1.0}),
        FeatureVector({"x": 0.2, "y": 1.0}),
        FeatureVector({"x": 3.0, "y": 4.7}),
        FeatureVector({"x": 0.15, "y": 5.0}),
        FeatureVector({"x": 4.0, "y": 0.3}),
    ]
    return IncrementalTreeClassifier.fit(data, ["low", "mid", "high", "mid", "low"])


def test_dumps_writes_preorder_lines():
    tree = IncrementalTreeClassifier.fit([weight(5.0), weight(9.0)], ["cat", "dog"])
    assert tree.dumps() == "Feature: weight\nThreshold: 7.0\ncat\ndog\n"


def test_nested_tree_text():
    tree = IncrementalTreeClassifier.fit(
        [weight(5.0), weight(9.0), weight(8.0)], ["cat", "dog", "cat"]
    )
    assert tree.dumps().splitlines() == [
        "Feature: weight",
        "Threshold: 7.0",
        "cat",
        "Feature: weight",
        "Threshold: 8.5",
        "cat",
        "dog",
    ]


def test_round_trip_classifies_identically(xy_tree):
    reloaded = IncrementalTreeClassifier.loads(xy_tree.dumps())

    probes = _grid()
    assert reloaded.predict(probes) == xy_tree.predict(probes)
    assert reloaded.dumps() == xy_tree.dumps()
    assert reloaded.depth == xy_tree.depth


def test_thresholds_survive_exactly():
    tree = IncrementalTreeClassifier.fit([weight(0.1), weight(0.2)], ["a", "b"])
    reloaded = IncrementalTreeClassifier.loads(tree.dumps())
    assert isinstance(tree.root, DecisionNode)
    assert isinstance(reloaded.root, DecisionNode)
    assert reloaded.root.threshold == tree.root.threshold


def test_loaded_leaves_have_no_exemplar(xy_tree):
    reloaded = IncrementalTreeClassifier.loads(xy_tree.dumps())
    stack = [reloaded.root]
    while stack:
        node = stack.pop()
        if isinstance(node, LeafNode):
            assert node.exemplar is None
        else:
            stack.extend([node.left, node.right])


def test_load_accepts_stream_with_crlf():
    tree = IncrementalTreeClassifier.load(
        io.StringIO("Feature: weight\r\nThreshold: 1.0E10\r\nsmall cat\r\nbig dog\r\n")
    )
    assert isinstance(tree.root, DecisionNode)
    assert tree.root.threshold == 1e10
    assert tree.classify(weight(5.0)) == "small cat"
    assert tree.classify(weight(1e11)) == "big dog"


def test_leaf_only_tree():
    tree = IncrementalTreeClassifier.load(["cat"])
    assert tree.root == LeafNode("cat")
    assert tree.classify(weight(3.0)) == "cat"


def test_empty_source_gives_empty_tree():
    tree = IncrementalTreeClassifier.load([])
    assert tree.is_empty
    assert tree.dumps() == ""
    assert IncrementalTreeClassifier.loads("").is_empty


def test_load_consumes_one_tree():
    """Lines after a complete tree stay in the source."""
    source = iter(["Feature: w", "Threshold: 2.0", "a", "b", "c", "Feature: v"])
    tree = IncrementalTreeClassifier.load(source)
    assert tree.n_leaves == 2
    assert next(source) == "c"


def test_load_requires_a_source():
    with pytest.raises(InvalidArgumentError):
        IncrementalTreeClassifier.load(None)  # type: ignore
    with pytest.raises(InvalidArgumentError):
        IncrementalTreeClassifier.loads(None)  # type: ignore


@pytest.mark.parametrize(
    "lines",
    [
        ["Feature: w", "Thresh: 1.0", "a", "b"],
        ["Feature: w", "Threshold: heavy", "a", "b"],
        ["Feature: w", "Threshold: inf", "a", "b"],
        ["Feature: w", "Threshold: nan", "a", "b"],
        ["Feature: w"],
        ["Feature: w", "Threshold: 1.0", "a"],
        ["Feature: w", "Threshold: 1.0", "", "b"],
        ["Feature: ", "Threshold: 1.0", "a", "b"],
    ],
)
def test_malformed_text_raises_parse_error(lines):
    with pytest.raises(ParseError):
        IncrementalTreeClassifier.load(lines)


def test_save_writes_to_stream(xy_tree):
    buffer = io.StringIO()
    xy_tree.save(buffer)
    assert buffer.getvalue() == xy_tree.dumps()
    with pytest.raises(InvalidArgumentError):
        xy_tree.save(None)  # type: ignore


def test_save_file_and_load_file(tmp_path, xy_tree):
    path = tmp_path / "trees" / "xy.txt"
    xy_tree.save_file(path)

    assert path.read_text(encoding="utf-8") == xy_tree.dumps()
    reloaded = IncrementalTreeClassifier.load_file(path)
    assert reloaded.predict(_grid()) == xy_tree.predict(_grid())

    with pytest.raises(InvalidArgumentError):
        xy_tree.save_file(tmp_path)
    with pytest.raises(FileNotFoundError):
        IncrementalTreeClassifier.load_file(tmp_path / "missing.txt")


def test_round_trip_keeps_labels_with_other_line_separators():
    """Only newlines end a line; form feeds and unicode separators stay in labels."""
    labels = ["cat", "big\x0cdog", "fish\u2028tank", "bird\x85"]
    data = [weight(1.0), weight(5.0), weight(9.0), weight(13.0)]
    tree = IncrementalTreeClassifier.fit(data, labels)

    reloaded = IncrementalTreeClassifier.loads(tree.dumps())

    assert reloaded.predict(data) == labels
    assert reloaded.dumps() == tree.dumps()


def test_loads_without_trailing_newline():
    tree = IncrementalTreeClassifier.loads("Feature: weight\nThreshold: 7.0\ncat\ndog")
    assert tree.classify(weight(8.0)) == "dog"


def test_far_apart_values_give_a_finite_threshold():
    tree = IncrementalTreeClassifier.fit([weight(-1.7e308), weight(1.7e308)], ["a", "b"])
    assert isinstance(tree.root, DecisionNode)
    assert tree.root.threshold == 0.0

    reloaded = IncrementalTreeClassifier.loads(tree.dumps())
    assert reloaded.classify(weight(-1.0)) == "a"
    assert reloaded.classify(weight(1.7e308)) == "b"
