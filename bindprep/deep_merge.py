"""Merging of a user configuration over the built-in defaults."""

from typing import Any

# Lists that extend the defaults instead of replacing them.
ADDITIVE_KEYS = {"signal_sections", "value_types"}


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` overlaid with ``update``, leaving both untouched.

    Sections such as ``module`` or ``events`` merge key by key. A user list
    replaces the default one (``rename.targets`` narrows the renamed kinds),
    except for extra signal section labels and extra value types, which are
    added to the built-in ones as a sorted, duplicate-free list.
    """
    result = base.copy()
    for key, value in update.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif key in ADDITIVE_KEYS and isinstance(current, list) and isinstance(value, list):
            result[key] = sorted({*current, *value})
        else:
            result[key] = value
    return result
