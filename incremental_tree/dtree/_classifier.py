"""Incremental decision tree.

A binary tree of feature/threshold splits grown one labeled example at a time.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Set, Tuple
import io
import logging

import pandas as pd

from incremental_tree.core._config import settings
from incremental_tree.core._exceptions import EmptyTreeError, InvalidArgumentError
from incremental_tree.core._exceptions import MissingExemplarError
from incremental_tree.core._types import ImageFormat, Label, Side
from incremental_tree.features import FeatureVector
from ._nodes import DecisionNode, LeafNode, Node, midpoint, validate_label
from ._text import LineSink, read_tree, write_tree


logger = logging.getLogger(__name__)


def _check_vector(vector: FeatureVector) -> None:
    if vector is None:  # type: ignore
        raise InvalidArgumentError("vector must be a FeatureVector, got None")
    if not isinstance(vector, FeatureVector):  # type: ignore
        raise InvalidArgumentError(
            f"vector must be a FeatureVector, got {type(vector).__name__}"
        )


def _check_parallel(
    data: Sequence[FeatureVector] | None, labels: Sequence[Label] | None
) -> None:
    if data is None or labels is None:
        raise InvalidArgumentError("data and labels must both be provided")
    if len(data) != len(labels):
        raise InvalidArgumentError(
            f"Length of provided data [{len(data)}] doesn't match "
            f"provided labels [{len(labels)}]"
        )


class IncrementalTreeClassifier:
    """Decision tree classifier grown by inserting labeled examples.

    Every decision node compares one feature against a threshold: values
    strictly below go left, all others (the threshold itself included) go
    right. Every leaf holds a label and the exemplar vector it was created
    from, which is what a later conflicting example is split against.

    Build a tree with :meth:`fit` or :meth:`load`; constructing one directly
    with no root gives an empty tree that :meth:`insert` can grow.

    Args:
        root: Root node of an existing tree, or None for an empty tree.
    """

    def __init__(self, root: Node | None = None):
        self._root: Node | None = root

    @classmethod
    def fit(
        cls, data: Sequence[FeatureVector], labels: Sequence[Label]
    ) -> IncrementalTreeClassifier:
        """Build a tree from labeled examples, inserted in order.

        The first example becomes the root leaf; each later one is inserted
        as with :meth:`insert`.

        Args:
            data: Feature vectors.
            labels: Label of each vector, same length as data.

        Returns:
            The fitted classifier.

        Raises:
            InvalidArgumentError: If data or labels is None, empty, of unequal
                length, or holds an invalid vector or label.
        """
        _check_parallel(data, labels)
        data, labels = list(data), list(labels)
        if len(data) == 0:
            raise InvalidArgumentError("Cannot fit a tree on empty data")
        for vector, label in zip(data, labels):
            _check_vector(vector)
            validate_label(label)

        tree = cls(LeafNode(label=labels[0], exemplar=data[0]))
        for vector, label in zip(data[1:], labels[1:]):
            tree._insert(vector, label)

        logger.info(
            f"Fitted tree on {len(data)} examples: "
            f"{tree.n_leaves} leaves, depth {tree.depth}"
        )
        return tree

    @property
    def root(self) -> Node | None:
        """The root node, None for an empty tree."""
        return self._root

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def insert(self, vector: FeatureVector, label: Label) -> None:
        """Incorporate one labeled example into the tree.

        The example descends to a leaf. A leaf with the same label is left
        untouched; otherwise the leaf is replaced by a decision node on the
        feature that differs most between the leaf's exemplar and the new
        vector, with the threshold halfway between their two values.

        Raises:
            InvalidArgumentError: If the vector or label is invalid.
            MissingExemplarError: If the example reaches a leaf loaded from
                text (no exemplar) and carries a different label.
            UnknownFeatureError: If the vector lacks a feature it is routed on.
        """
        _check_vector(vector)
        validate_label(label)
        self._insert(vector, label)

    def _insert(self, vector: FeatureVector, label: Label) -> None:
        if self._root is None:
            self._root = LeafNode(label=label, exemplar=vector)
            logger.debug(f"Planted root leaf {label!r}")
            return

        parent: DecisionNode | None = None
        side: Side = "left"
        node = self._root
        while isinstance(node, DecisionNode):
            parent = node
            side = "left" if vector.get(node.feature) < node.threshold else "right"
            node = node.left if side == "left" else node.right

        if node.label == label:
            return

        split = self._split(node, vector, label)
        if parent is None:
            self._root = split
        elif side == "left":
            parent.left = split
        else:
            parent.right = split

    def _split(self, leaf: LeafNode, vector: FeatureVector, label: Label) -> DecisionNode:
        if leaf.exemplar is None:
            raise MissingExemplarError(
                f"Leaf {leaf.label!r} has no exemplar, so it cannot be split "
                f"to make room for {label!r}. Leaves loaded from text keep "
                "only their labels."
            )

        feature = leaf.exemplar.find_most_discriminating_feature(vector)
        old_value = leaf.exemplar.get(feature)
        new_value = vector.get(feature)
        threshold = midpoint(old_value, new_value)
        if old_value == new_value:
            logger.warning(
                f"Labels {leaf.label!r} and {label!r} conflict on identical "
                f"features. {leaf.label!r} will be shadowed."
            )

        new_leaf = LeafNode(label=label, exemplar=vector)
        if new_value < threshold:
            decision = DecisionNode(feature, threshold, left=new_leaf, right=leaf)
        else:
            decision = DecisionNode(feature, threshold, left=leaf, right=new_leaf)
        logger.debug(
            f"Split leaf {leaf.label!r} on {feature!r} at {threshold} "
            f"for {label!r}"
        )
        return decision

    def classify(self, vector: FeatureVector) -> Label:
        """Label of the leaf the vector descends to.

        Raises:
            InvalidArgumentError: If vector is None.
            EmptyTreeError: If the tree has no nodes.
            UnknownFeatureError: If the vector lacks a feature it is routed on.
        """
        _check_vector(vector)
        node = self._root
        if node is None:
            raise EmptyTreeError("Tree is empty. Fit, insert or load before classifying.")
        while isinstance(node, DecisionNode):
            node = node.route(vector)
        return node.label

    def predict(self, data: Iterable[FeatureVector]) -> List[Label]:
        """Classify each vector in turn."""
        if data is None:  # type: ignore
            raise InvalidArgumentError("data must be provided")
        return [self.classify(vector) for vector in data]

    def calculate_accuracy(
        self, data: Sequence[FeatureVector], labels: Sequence[Label]
    ) -> Dict[str, float]:
        """Fraction of correctly classified examples, per expected label.

        Args:
            data: Feature vectors to classify.
            labels: Expected label of each vector.

        Returns:
            Mapping from each expected label to its accuracy, plus the overall
            accuracy under ``settings.OVERALL_KEY`` ("Overall" by default).
            Every expected label is listed, with 0.0 for a label that was
            never classified correctly. The overall accuracy of no examples
            is NaN.

        Raises:
            InvalidArgumentError: If data and labels differ in length.
        """
        _check_parallel(data, labels)
        frame = pd.DataFrame(
            {"expected": list(labels), "predicted": self.predict(data)},
            dtype=object,
        )
        correct = (frame["expected"] == frame["predicted"]).astype(float)
        per_label = correct.groupby(frame["expected"], sort=False).mean()

        overall_key = settings.OVERALL_KEY
        accuracy: Dict[str, float] = {overall_key: float(correct.mean())}
        for label, value in per_label.items():
            if label == overall_key:
                logger.warning(
                    f"Label {label!r} clashes with the overall accuracy key "
                    "and is left out."
                )
                continue
            accuracy[str(label)] = float(value)
        return accuracy

    def save(self, output: LineSink) -> None:
        """Write the tree's text form to a writable text stream.

        Raises:
            InvalidArgumentError: If output is None.
        """
        if output is None:  # type: ignore
            raise InvalidArgumentError("output must be a writable stream, got None")
        n_lines = write_tree(self._root, output)
        logger.debug(f"Wrote {n_lines} lines")

    def dumps(self) -> str:
        """Text form of the tree."""
        buffer = io.StringIO()
        self.save(buffer)
        return buffer.getvalue()

    def save_file(self, path: str | PathLike[str]) -> None:
        """Write the text form of the tree to a file, creating parent dirs."""
        path = Path(path)
        if path.is_dir():
            raise InvalidArgumentError("Please provide a file, not a directory.")
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding=settings.FILE_ENCODING, newline="\n") as f:
            self.save(f)
        logger.info(f"Saved tree to {path}")

    @classmethod
    def load(cls, lines: Iterable[str]) -> IncrementalTreeClassifier:
        """Rebuild a tree from its text form.

        Args:
            lines: Any line source, e.g. an open text file or a list of
                strings. Exactly one tree is consumed from it.

        Returns:
            The classifier. Its leaves have no exemplars, so it classifies
            exactly like the saved tree but cannot split those leaves.

        Raises:
            InvalidArgumentError: If lines is None.
            ParseError: If the text is malformed.
        """
        if lines is None:  # type: ignore
            raise InvalidArgumentError("lines must be a line source, got None")
        return cls(read_tree(lines))

    @classmethod
    def loads(cls, text: str) -> IncrementalTreeClassifier:
        """Rebuild a tree from a string holding its text form."""
        if text is None:  # type: ignore
            raise InvalidArgumentError("text must be a string, got None")
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls.load(lines)

    @classmethod
    def load_file(cls, path: str | PathLike[str]) -> IncrementalTreeClassifier:
        """Rebuild a tree from a file written by :meth:`save_file`."""
        path = Path(path)
        if path.is_dir():
            raise InvalidArgumentError("Please provide a file, not a directory.")
        with path.open("r", encoding=settings.FILE_ENCODING) as f:
            tree = cls.load(f)
        logger.info(f"Loaded tree from {path}")
        return tree

    def _walk(self) -> Iterable[Tuple[Node, int]]:
        if self._root is None:
            return
        stack: List[Tuple[Node, int]] = [(self._root, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if isinstance(node, DecisionNode):
                stack.append((node.right, depth + 1))
                stack.append((node.left, depth + 1))

    @property
    def depth(self) -> int:
        """Edges on the longest root-to-leaf path. 0 for a single leaf or no tree."""
        return max((depth for _, depth in self._walk()), default=0)

    @property
    def n_leaves(self) -> int:
        return sum(1 for node, _ in self._walk() if isinstance(node, LeafNode))

    @property
    def labels(self) -> Set[Label]:
        """Labels held by the leaves."""
        return {node.label for node, _ in self._walk() if isinstance(node, LeafNode)}

    def view(self, format: ImageFormat = "png") -> bytes:
        """Render the tree as PNG/SVG bytes.

        Args:
            format: Output image format ('png' or 'svg').

        Returns:
            Rendered tree image data as bytes.

        Raises:
            EmptyTreeError: If the tree has no nodes.
            ImportError: If graphviz package is not installed.
        """
        if self._root is None:
            raise EmptyTreeError("Tree is empty. Nothing to render.")

        try:
            from graphviz import Digraph  # type: ignore
        except ImportError as e:
            raise ImportError(
                "The 'graphviz' Python package is required. "
                "Install it with `pip install graphviz`."
            ) from e

        def _escape(text: str) -> str:
            return text.replace("\\", "\\\\").replace('"', '\\"')

        dot = Digraph(
            name="IncrementalTree",
            format=format,
            graph_attr={"rankdir": "TB"},
        )  # type: ignore

        ids: Dict[int, str] = {}
        for node, _ in self._walk():
            node_id = ids.setdefault(id(node), str(len(ids)))
            if isinstance(node, LeafNode):
                dot.node(  # type: ignore
                    node_id,
                    _escape(node.label),
                    shape="box",
                    style="rounded,filled",
                    fillcolor="lightgrey",
                    fontsize="10",
                )
                continue
            dot.node(  # type: ignore
                node_id,
                _escape(f"{node.feature} < {node.threshold:g}"),
                shape="ellipse",
                fontsize="10",
            )
            for child, edge_label in ((node.left, "yes"), (node.right, "no")):
                child_id = ids.setdefault(id(child), str(len(ids)))
                dot.edge(node_id, child_id, label=edge_label)  # type: ignore

        return dot.pipe(format=format)  # type: ignore

    def __repr__(self) -> str:
        if self._root is None:
            return "IncrementalTreeClassifier(empty)"
        return (
            f"IncrementalTreeClassifier(leaves={self.n_leaves}, depth={self.depth})"
        )
