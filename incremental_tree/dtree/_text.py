"""Line-oriented text form of a tree.

A decision node is written as two lines, ``Feature: <name>`` and
``Threshold: <value>``, followed by its left and then its right subtree. A
leaf is a single line holding its label. Exemplars are not written, so leaves
read back from text carry none.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Protocol
import logging
import math

from incremental_tree.core._exceptions import ParseError
from ._nodes import DecisionNode, LeafNode, Node
from ._nodes import FEATURE_PREFIX, THRESHOLD_PREFIX


logger = logging.getLogger(__name__)


class LineSink(Protocol):
    def write(self, s: str, /) -> int: ...


class _Pending:
    """A decision node whose children are still being read."""

    __slots__ = ("feature", "threshold", "children")

    def __init__(self, feature: str, threshold: float):
        self.feature = feature
        self.threshold = threshold
        self.children: List[Node] = []


def format_threshold(threshold: float) -> str:
    """Shortest text that parses back to exactly the same float."""
    return repr(float(threshold))


def iter_lines(root: Node | None) -> Iterator[str]:
    """Yield the lines of the text form, pre-order, without terminators."""
    if root is None:
        return
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, LeafNode):
            yield node.label
        else:
            yield f"{FEATURE_PREFIX}{node.feature}"
            yield f"{THRESHOLD_PREFIX}{format_threshold(node.threshold)}"
            stack.append(node.right)
            stack.append(node.left)


def write_tree(root: Node | None, sink: LineSink) -> int:
    """Write the text form to a sink. Returns the number of lines written."""
    n_lines = 0
    for line in iter_lines(root):
        sink.write(line + "\n")
        n_lines += 1
    return n_lines


def _parse_threshold(line: str | None, line_no: int) -> float:
    if line is None:
        raise ParseError(f"Line {line_no}: expected a threshold, got end of input")
    if not line.startswith(THRESHOLD_PREFIX):
        raise ParseError(
            f"Line {line_no}: expected {THRESHOLD_PREFIX!r} prefix, got {line!r}"
        )
    text = line[len(THRESHOLD_PREFIX) :]
    try:
        threshold = float(text)
    except ValueError as e:
        raise ParseError(f"Line {line_no}: invalid threshold {text!r}") from e
    if not math.isfinite(threshold):
        raise ParseError(f"Line {line_no}: threshold must be finite, got {text!r}")
    return threshold


def read_tree(lines: Iterable[str]) -> Node | None:
    """Read one tree from a line source.

    Lines after the last node of the tree are left unread. Returns None when
    the source yields no lines at all.

    Raises:
        ParseError: If the text is malformed or ends before the tree is complete.
    """
    source = iter(lines)
    stack: List[_Pending] = []
    line_no = 0

    while True:
        raw = next(source, None)
        line_no += 1
        if raw is None:
            if not stack:
                return None
            raise ParseError(
                f"Line {line_no}: unexpected end of input, "
                f"{len(stack)} decision node(s) still incomplete"
            )
        line = raw.rstrip("\r\n")

        if line.startswith(FEATURE_PREFIX):
            feature = line[len(FEATURE_PREFIX) :]
            if not feature:
                raise ParseError(f"Line {line_no}: empty feature name")
            raw_threshold = next(source, None)
            line_no += 1
            threshold = _parse_threshold(
                None if raw_threshold is None else raw_threshold.rstrip("\r\n"),
                line_no,
            )
            stack.append(_Pending(feature, threshold))
            continue

        if not line:
            raise ParseError(f"Line {line_no}: empty leaf label")
        node: Node = LeafNode(label=line)

        # Attach the finished node, folding up every decision node it completes.
        while stack:
            stack[-1].children.append(node)
            if len(stack[-1].children) < 2:
                break
            pending = stack.pop()
            node = DecisionNode(
                feature=pending.feature,
                threshold=pending.threshold,
                left=pending.children[0],
                right=pending.children[1],
            )
            logger.debug(f"Read decision node on {node.feature!r} at {node.threshold}")

        if not stack:
            return node
