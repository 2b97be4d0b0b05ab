"""Tests for rendering trees with graphviz."""

import pytest

from incremental_tree import EmptyTreeError, FeatureVector, IncrementalTreeClassifier


def test_empty_tree_cannot_be_rendered():
    with pytest.raises(EmptyTreeError):
        IncrementalTreeClassifier().view()


def test_view_svg():
    graphviz = pytest.importorskip("graphviz")
    tree = IncrementalTreeClassifier.fit(
        [FeatureVector({"weight": 5.0}), FeatureVector({"weight": 9.0})],
        ["cat", "dog"],
    )
    try:
        svg = tree.view(format="svg")
    except graphviz.ExecutableNotFound:
        pytest.skip("Graphviz binary not installed")

    text = svg.decode("utf-8")
    assert "weight &lt; 7" in text
    assert "cat" in text and "dog" in text
