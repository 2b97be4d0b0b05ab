from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias
import math

from incremental_tree.core._exceptions import InvalidArgumentError
from incremental_tree.core._types import FeatureName, Label
from incremental_tree.features import FeatureVector


FEATURE_PREFIX = "Feature: "
THRESHOLD_PREFIX = "Threshold: "


@dataclass(slots=True)
class LeafNode:
    """A terminal node holding a label."""

    label: Label = field(metadata={"description": "The classification label."})
    exemplar: FeatureVector | None = field(
        default=None,
        metadata={
            "description": "The vector inserted when this leaf was created. "
            "None for leaves loaded from the text form."
        },
    )


@dataclass(slots=True)
class DecisionNode:
    """A binary split on one feature."""

    feature: FeatureName = field(metadata={"description": "The feature compared."})
    threshold: float = field(
        metadata={
            "description": "Values strictly below go left, all others go right."
        }
    )
    left: Node = field(metadata={"description": "Subtree for values < threshold."})
    right: Node = field(metadata={"description": "Subtree for values >= threshold."})

    def route(self, vector: FeatureVector) -> Node:
        """Child the vector descends into."""
        if vector.get(self.feature) < self.threshold:
            return self.left
        return self.right


Node: TypeAlias = DecisionNode | LeafNode


def midpoint(one: float, two: float) -> float:
    """Point halfway between two values.

    Falls back to halving each value when their distance overflows.
    """
    point = min(one, two) + abs(one - two) / 2.0
    if math.isfinite(point):
        return point
    return one / 2.0 + two / 2.0


def validate_label(label: Label) -> None:
    """Reject labels the text form cannot store as a leaf line."""
    if not isinstance(label, str):  # type: ignore
        raise InvalidArgumentError(f"Labels must be strings, got {type(label)}")
    if not label:
        raise InvalidArgumentError("Labels must be non-empty")
    if "\n" in label or "\r" in label:
        raise InvalidArgumentError(f"Labels must not contain line breaks: {label!r}")
    if label.startswith(FEATURE_PREFIX):
        raise InvalidArgumentError(
            f"Labels must not start with {FEATURE_PREFIX!r}: {label!r}"
        )
