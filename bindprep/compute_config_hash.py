"""Fingerprint of the merged configuration, recorded in the run report."""

import hashlib
import json
from typing import Any


def compute_config_hash(config: dict[str, Any]) -> str:
    """Return the SHA-256 of the configuration serialized as sorted-key JSON.

    Two runs over the same module with equal settings report the same hash,
    whatever order the YAML file listed its keys in.
    """
    canonical = json.dumps(config, sort_keys=True, ensure_ascii=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
