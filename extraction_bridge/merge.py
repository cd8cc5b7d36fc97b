"""Precedence-aware merging of attribute sets.

Results coming from several backends (and several subtypes) are folded
into one attribute set. The side that was resolved first has precedence:
a later source only fills keys that are still missing, and nested
mappings are merged key by key instead of being replaced wholesale.
"""

import copy
from collections.abc import Mapping
from typing import Any


def merge_precedence(primary: Mapping[str, Any], secondary: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two attribute sets, keeping primary's value on conflicts.

    Neither input is mutated; the result shares no nested containers with
    them.

    Args:
        primary: Attribute set that wins on conflicting keys
        secondary: Attribute set that only contributes missing keys

    Returns:
        New merged attribute set
    """
    merged = {key: copy.deepcopy(value) for key, value in primary.items()}

    for key, value in secondary.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
            continue

        existing = merged[key]
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_precedence(existing, value)
        # Scalar on either side: primary is kept

    return merged
