"""Named numeric feature vectors."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterator, Mapping
import math
import re

import numpy as np
import pandas as pd

from incremental_tree.core._exceptions import InvalidArgumentError
from incremental_tree.core._exceptions import UnknownFeatureError
from incremental_tree.core._types import FeatureName


_WORD_RE = re.compile(r"[\w']+")


class FeatureVector(Mapping[FeatureName, float]):
    """An immutable mapping from feature name to numeric value.

    Args:
        values: Feature name to value. Names must be non-empty and single-line,
            values must be finite.
        default: Value reported for features the vector does not hold. If None,
            asking for an unknown feature raises UnknownFeatureError.

    Ties in :meth:`find_most_discriminating_feature` go to the feature name
    that sorts first, so results are reproducible regardless of insertion order.
    """

    __slots__ = ("_values", "_default", "_hash")

    def __init__(
        self, values: Mapping[FeatureName, float], default: float | None = None
    ):
        if values is None:  # type: ignore
            raise InvalidArgumentError("values must be a mapping, got None")
        if default is not None and not math.isfinite(default):
            raise InvalidArgumentError(f"default must be finite, got {default}")

        checked: Dict[FeatureName, float] = {}
        for name, value in values.items():
            if not isinstance(name, str) or not name:  # type: ignore
                raise InvalidArgumentError(
                    f"Feature names must be non-empty strings, got {name!r}"
                )
            if "\n" in name or "\r" in name:
                raise InvalidArgumentError(
                    f"Feature names must not contain line breaks: {name!r}"
                )
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"Feature {name!r} has a non-numeric value: {value!r}"
                ) from e
            if not math.isfinite(value):
                raise InvalidArgumentError(
                    f"Feature {name!r} has a non-finite value: {value}"
                )
            checked[name] = value

        self._values = checked
        self._default = None if default is None else float(default)
        self._hash: int | None = None

    @classmethod
    def from_text(cls, text: str) -> FeatureVector:
        """Build a bag-of-words vector: lower-cased word counts, 0.0 for others."""
        if text is None:  # type: ignore
            raise InvalidArgumentError("text must be a string, got None")
        counts = Counter(_WORD_RE.findall(text.lower()))
        return cls({w: float(c) for w, c in counts.items()}, default=0.0)

    @classmethod
    def from_series(
        cls, row: pd.Series, default: float | None = None
    ) -> FeatureVector:
        """Build a vector from a pandas row of numeric values."""
        return cls({str(k): v for k, v in row.items()}, default=default)

    @property
    def default(self) -> float | None:
        """Value reported for unknown features, if any."""
        return self._default

    def get(self, feature: FeatureName, default: Any = None) -> float:  # type: ignore[override]
        """Value of a feature.

        Args:
            feature: The feature name.
            default: Fallback for an unknown feature. Takes precedence over
                the vector's own default.

        Raises:
            UnknownFeatureError: If the feature is unknown and there is no
                default to fall back on.
        """
        if feature in self._values:
            return self._values[feature]
        if default is not None:
            return float(default)
        if self._default is not None:
            return self._default
        raise UnknownFeatureError(feature)

    def find_most_discriminating_feature(self, other: FeatureVector) -> FeatureName:
        """Feature with the largest absolute difference between two vectors.

        Features held by only one vector are compared through the other
        vector's default. Ties go to the name that sorts first.

        Raises:
            InvalidArgumentError: If other is None or neither vector has features.
            UnknownFeatureError: If a feature is missing from a vector without
                a default.
        """
        if other is None:  # type: ignore
            raise InvalidArgumentError("other must be a FeatureVector, got None")

        names = sorted(self._values.keys() | other._values.keys())
        if not names:
            raise InvalidArgumentError("Cannot compare two empty feature vectors")

        mine = np.fromiter((self.get(n) for n in names), dtype=np.float64)
        theirs = np.fromiter((other.get(n) for n in names), dtype=np.float64)
        return names[int(np.argmax(np.abs(mine - theirs)))]

    def to_dict(self) -> Dict[FeatureName, float]:
        """Convert the vector to a plain dictionary."""
        return dict(self._values)

    def __getitem__(self, feature: FeatureName) -> float:
        return self.get(feature)

    def __contains__(self, feature: object) -> bool:
        return feature in self._values

    def __iter__(self) -> Iterator[FeatureName]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureVector):
            return NotImplemented
        return self._values == other._values and self._default == other._default

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash((frozenset(self._values.items()), self._default))
        return self._hash

    def __repr__(self) -> str:
        return f"FeatureVector({self._values!r}, default={self._default!r})"
