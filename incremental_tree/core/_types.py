from __future__ import annotations

from typing import Literal, TypeAlias


Label: TypeAlias = str
FeatureName: TypeAlias = str
Side = Literal["left", "right"]
ImageFormat = Literal["png", "svg"]
