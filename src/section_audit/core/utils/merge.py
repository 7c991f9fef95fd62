"""Deep merge used to layer project config over the bundled defaults.

Array semantics:
- Default: replace array entirely
- Prefix with "+": append to existing array
- Prefix with "=": explicit replace (same as default)
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"rules": {"a": {"enabled": True}}}, {"rules": {"a": {"x": 1}}})
        {'rules': {'a': {'enabled': True, 'x': 1}}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result:
            if isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            elif isinstance(result[key], list) and isinstance(value, list):
                result[key] = merge_arrays(result[key], value)
            else:
                result[key] = value
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge arrays with override semantics.

    Example:
        >>> merge_arrays(["a"], ["b"])
        ['b']
        >>> merge_arrays(["a"], ["+", "b"])
        ['a', 'b']
        >>> merge_arrays(["a"], [])
        []
    """
    if not override:
        return []
    first = override[0]
    if isinstance(first, str):
        if first == "+":
            return [*base, *override[1:]]
        if first == "=":
            return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
