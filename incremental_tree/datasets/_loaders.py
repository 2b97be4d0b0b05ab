from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Dict, List, Tuple
import logging

import orjson
import pandas as pd
from pydantic import BaseModel, Field, ValidationError

from incremental_tree.core._config import settings
from incremental_tree.core._exceptions import InvalidArgumentError
from incremental_tree.core._types import Label
from incremental_tree.features import FeatureVector


logger = logging.getLogger(__name__)

Examples = Tuple[List[FeatureVector], List[Label]]


class LabeledExample(BaseModel):
    """One training or test example."""

    features: Dict[str, float] = Field(description="Feature name to value.")
    label: Label = Field(min_length=1, description="The expected label.")


def load_csv(
    path: str | PathLike[str],
    label_column: str = "label",
    text_column: str | None = None,
) -> Examples:
    """Read labeled examples from a CSV file.

    Args:
        path: The CSV file.
        label_column: Column holding the labels.
        text_column: Column holding free text. If given, each row becomes a
            bag-of-words vector of that text and other columns are ignored.
            Otherwise every column except the label is a numeric feature.

    Returns:
        The vectors and their labels, in file order.

    Raises:
        InvalidArgumentError: If a column is missing or a row is invalid.
    """
    text_dtypes = {label_column: str}
    if text_column is not None:
        text_dtypes[text_column] = str
    df = pd.read_csv(  # type: ignore
        path,
        encoding=settings.FILE_ENCODING,
        keep_default_na=False,
        dtype=text_dtypes,
    )
    if label_column not in df.columns:
        raise InvalidArgumentError(f"Label column {label_column!r} not found in {path}")
    if text_column is not None and text_column not in df.columns:
        raise InvalidArgumentError(f"Text column {text_column!r} not found in {path}")

    labels = [str(label) for label in df[label_column]]
    vectors: List[FeatureVector] = []
    for row_no, (_, row) in enumerate(df.iterrows(), start=1):
        try:
            if text_column is not None:
                vectors.append(FeatureVector.from_text(str(row[text_column])))
            else:
                vectors.append(FeatureVector.from_series(row.drop(label_column)))
        except InvalidArgumentError as e:
            raise InvalidArgumentError(f"Row {row_no} of {path}: {e}") from e

    logger.info(f"Loaded {len(vectors)} examples from {path}")
    return vectors, labels


def load_jsonl(path: str | PathLike[str]) -> Examples:
    """Read labeled examples from a JSON lines file.

    Each non-blank line is an object like
    ``{"features": {"weight": 5.0}, "label": "cat"}``.

    Raises:
        InvalidArgumentError: If a line is not a valid example.
    """
    vectors: List[FeatureVector] = []
    labels: List[Label] = []
    with Path(path).open("rb") as f:
        for line_no, raw in enumerate(f, start=1):
            if not raw.strip():
                continue
            try:
                example = LabeledExample.model_validate(orjson.loads(raw))
                vectors.append(FeatureVector(example.features))
            except (orjson.JSONDecodeError, ValidationError, InvalidArgumentError) as e:
                raise InvalidArgumentError(f"Line {line_no} of {path}: {e}") from e
            labels.append(example.label)

    logger.info(f"Loaded {len(vectors)} examples from {path}")
    return vectors, labels


def load_examples(
    path: str | PathLike[str],
    label_column: str = "label",
    text_column: str | None = None,
) -> Examples:
    """Read labeled examples, picking the reader from the file extension."""
    if Path(path).suffix.lower() == ".jsonl":
        return load_jsonl(path)
    return load_csv(path, label_column=label_column, text_column=text_column)
