"""Readers for labeled example files."""

from ._loaders import LabeledExample, load_csv, load_jsonl, load_examples

__all__ = ["LabeledExample", "load_csv", "load_jsonl", "load_examples"]
