"""
Dotted path helpers for manifest dictionaries.

Paths look like ``spec.template.spec.containers[0].env``: dot separated keys,
each optionally followed by one or more ``[index]`` suffixes.
"""

import re
from typing import Any

_SEGMENT = re.compile(r"^([^\[\]]*)((?:\[\d+\])*)$")
_INDEX = re.compile(r"\[(\d+)\]")

_MISSING = object()


def parse_path(path: str) -> list[str | int]:
    """
    Split a dotted path into dict keys and list indexes.

    Example:
        >>> parse_path("spec.containers[0].env")
        ['spec', 'containers', 0, 'env']
    """
    if not path:
        raise ValueError("Path must not be empty")

    tokens: list[str | int] = []
    for segment in path.split("."):
        match = _SEGMENT.match(segment)
        if not match or (not match.group(1) and not match.group(2)):
            raise ValueError(f"Invalid path segment '{segment}' in '{path}'")
        if match.group(1):
            tokens.append(match.group(1))
        tokens.extend(int(index) for index in _INDEX.findall(match.group(2)))
    return tokens


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Read the value at a dotted path, or `default` when any step is missing."""
    current = obj
    for token in parse_path(path):
        if isinstance(token, int):
            if not isinstance(current, list) or token >= len(current):
                return default
            current = current[token]
        else:
            if not isinstance(current, dict) or token not in current:
                return default
            current = current[token]
    return current


def has_path(obj: Any, path: str) -> bool:
    return get_path(obj, path, _MISSING) is not _MISSING


def set_path(obj: dict[str, Any], path: str, value: Any) -> None:
    """
    Write a value at a dotted path, creating intermediate containers.

    Missing list slots up to the requested index are filled with empty dicts.
    """
    tokens = parse_path(path)
    current: Any = obj
    for token, next_token in zip(tokens, tokens[1:]):
        container: Any = [] if isinstance(next_token, int) else {}
        if isinstance(token, int):
            while len(current) <= token:
                current.append({})
            if not isinstance(current[token], (dict, list)):
                current[token] = container
        elif not isinstance(current.get(token), (dict, list)):
            current[token] = container
        current = current[token]

    last = tokens[-1]
    if isinstance(last, int):
        while len(current) <= last:
            current.append(None)
    current[last] = value


def deep_merge(base: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge `incoming` into a copy of `base`. Nested dicts merge, everything else replaces."""
    merged = dict(base)
    for key, value in incoming.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
