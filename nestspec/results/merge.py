"""Merge failure messages from repeated executions of the same spec.

When a spec's declaration is executed once per leaf path, assertions in
ancestor specs run many times. Messages that repeat verbatim are reported once;
messages that differ between executions (because the assertion observed
changed state) are all kept, in the order they were first seen.
"""

from __future__ import annotations

from typing import Iterable, List


def merge_errors(existing: List[str], incoming: Iterable[str]) -> List[str]:
    """Append messages from `incoming` that `existing` does not already hold.

    Equality is exact text equality. `existing` is modified in place and
    never gains a duplicate, including duplicates within `incoming` itself.

    Args:
        existing: Previously merged messages, first-seen order.
        incoming: Messages from one execution, in the order they were recorded.

    Returns:
        The messages that were appended, in append order.
    """
    seen = set(existing)
    added: List[str] = []
    for message in incoming:
        if message in seen:
            continue
        seen.add(message)
        existing.append(message)
        added.append(message)
    return added
