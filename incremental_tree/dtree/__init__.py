"""A binary decision tree grown one labeled example at a time.

Leaves split on the feature that best separates a conflicting example from
the leaf's exemplar, and the whole tree round-trips through a line-oriented
text form.
"""

from ._classifier import IncrementalTreeClassifier
from ._nodes import DecisionNode, LeafNode, Node, midpoint

__all__ = [
    "IncrementalTreeClassifier",
    "DecisionNode",
    "LeafNode",
    "Node",
    "midpoint",
]
