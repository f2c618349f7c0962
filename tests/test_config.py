"""Tests for configuration loading and merging."""

from pathlib import Path

import yaml

from bindprep.compute_config_hash import compute_config_hash
from bindprep.deep_merge import deep_merge
from bindprep.load_config import DEFAULT_CONFIG, load_config


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    base = {"module": {"library": "Qt5Core", "qmake": "qmake"}}
    update = {"module": {"qmake": "/opt/qt/bin/qmake", "make": "nmake"}}
    merged = deep_merge(base, update)
    assert merged == {
        "module": {"library": "Qt5Core", "qmake": "/opt/qt/bin/qmake", "make": "nmake"}
    }


def test_deep_merge_arrays_replace() -> None:
    """Verify that ordinary arrays are replaced."""
    merged = deep_merge({"targets": ["method", "field"]}, {"targets": ["event"]})
    assert merged == {"targets": ["event"]}


def test_deep_merge_signal_sections_additive() -> None:
    """Verify that signal sections and value types accumulate."""
    base = {"signal_sections": ["Q_SIGNALS", "signals"], "value_types": ["QPoint"]}
    update = {"signal_sections": ["Q_SIGNALS", "MY_SIGNALS"], "value_types": ["QColor"]}
    merged = deep_merge(base, update)
    assert merged["signal_sections"] == ["MY_SIGNALS", "Q_SIGNALS", "signals"]
    assert merged["value_types"] == ["QColor", "QPoint"]


def test_deep_merge_does_not_mutate_base() -> None:
    """Verify that merging leaves the base mapping untouched."""
    base = {"a": 1}
    deep_merge(base, {"a": 2})
    assert base == {"a": 1}


def test_compute_config_hash_stability() -> None:
    """Verify that config hash is stable regardless of key order."""
    config1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}}
    config2 = {"a": 1, "b": 2, "nested": {"x": 1, "y": 2}}
    assert compute_config_hash(config1) == compute_config_hash(config2)
    assert compute_config_hash(config1) != compute_config_hash({"a": 1})


def test_load_config_defaults() -> None:
    """Verify that default config is loaded when no path is provided."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config["events"]["signal_suffix"] == "Event"
    assert config["events"]["collision_prefix"] == "On"
    assert config["visibility"]["private_prefix"] == "Private"

    # The defaults are copied, not shared.
    config["value_types"].append("QColor")
    assert DEFAULT_CONFIG["value_types"] == []


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that user config correctly overrides defaults."""
    config_file = tmp_path / "config.yml"
    config_data = {
        "module": {"library": "Qt5Widgets", "include_path": "/opt/qt/include"},
        "events": {"signal_sections": ["MY_SIGNALS"]},
        "rename": {"targets": ["method"]},
    }
    config_file.write_text(yaml.dump(config_data))

    loaded = load_config(str(config_file))

    assert loaded["module"]["library"] == "Qt5Widgets"
    assert loaded["module"]["qmake"] == "qmake"  # Default
    assert "Q_SIGNALS" in loaded["events"]["signal_sections"]  # Default
    assert "MY_SIGNALS" in loaded["events"]["signal_sections"]  # Added
    assert loaded["rename"]["targets"] == ["method"]


def test_load_config_missing_file_uses_defaults(tmp_path: Path) -> None:
    """Verify that a missing config file falls back to defaults."""
    assert load_config(str(tmp_path / "absent.yml")) == DEFAULT_CONFIG
