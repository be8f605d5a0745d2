"""Utilities for handling YAML parsing quirks and common operations."""

from typing import Any, Dict, TypeVar

import yaml

V = TypeVar("V")


def normalize_yaml_dict_keys(data: Dict[Any, V]) -> Dict[str, V]:
    """Normalize dictionary keys from YAML parsing to consistent string keys.

    YAML 1.1 boolean keys (e.g., true, false, yes, no, on, off) get converted to
    Python True/False. They are turned into "True"/"False" so every key is a
    string.

    Args:
        data: Dictionary that may contain boolean or other non-string keys.

    Returns:
        Dictionary with all keys converted to strings.

    Examples:
        >>> normalize_yaml_dict_keys({True: "a", 3: "b", "c": "d"})
        {'True': 'a', '3': 'b', 'c': 'd'}
    """
    return {str(key): value for key, value in data.items()}


def load_yaml_mapping(yaml_str: str) -> Dict[str, Any]:
    """Parse a YAML document that must be a mapping at the top level.

    An empty document yields an empty dict.

    Raises:
        ValueError: If the document is not a mapping.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    return normalize_yaml_dict_keys(data)
