"""Feature vectors consumed by the classifier."""

from ._vector import FeatureVector

__all__ = ["FeatureVector"]
