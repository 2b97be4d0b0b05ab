"""Tests for library settings."""

from incremental_tree import FeatureVector, IncrementalTreeClassifier
from incremental_tree.core._config import Settings, settings


def test_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "FILE_ENCODING", "OVERALL_KEY"):
        monkeypatch.delenv(f"INCREMENTAL_TREE_{name}", raising=False)
    s = Settings(_env_file=None)  # type: ignore
    assert s.LOG_LEVEL == "WARNING"
    assert s.FILE_ENCODING == "utf-8"
    assert s.OVERALL_KEY == "Overall"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INCREMENTAL_TREE_LOG_LEVEL", "debug")
    monkeypatch.setenv("INCREMENTAL_TREE_OVERALL_KEY", "All")
    s = Settings(_env_file=None)  # type: ignore
    assert s.LOG_LEVEL == "debug"
    assert s.OVERALL_KEY == "All"


def test_overall_key_is_used_by_accuracy(monkeypatch):
    monkeypatch.setattr(settings, "OVERALL_KEY", "All")
    tree = IncrementalTreeClassifier.fit([FeatureVector({"w": 1.0})], ["cat"])
    assert tree.calculate_accuracy([FeatureVector({"w": 1.0})], ["cat"]) == {
        "All": 1.0,
        "cat": 1.0,
    }
