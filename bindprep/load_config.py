"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from bindprep.deep_merge import deep_merge

DEFAULT_CONFIG: dict[str, Any] = {
    "module": {
        "library": "",
        "include_path": "",
        "library_path": "",
        "target": "",
        "system_include_dirs": [],
        "framework_dirs": [],
        "docs": "",
        "qmake": "qmake",
        "make": "make",
        "platform": None,
    },
    "visibility": {
        "private_prefix": "Private",
        "private_suffix": "Private",
    },
    "rename": {
        "pattern": "upper_camel_case",
        "targets": [
            "function",
            "method",
            "property",
            "delegate",
            "field",
            "variable",
            "event",
        ],
    },
    "events": {
        "signal_sections": ["Q_SIGNALS", "signals"],
        "signal_suffix": "Event",
        "event_base_class": "QEvent",
        "collision_prefix": "On",
    },
    "value_types": [],
    "output": {
        "tree_file": "{module}.tree.yml",
        "report_file": "pipeline_report.json",
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config
