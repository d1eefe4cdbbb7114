# src/taskboard/core/selection.py

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import ID


def resolve_selection(candidates: Iterable[ID | None], available: Sequence[ID]) -> ID | None:
    """
    Pick the board id to select.

    - the first candidate (None entries skipped) present in `available`,
    - else the first id of `available` (callers pass entities.board_order),
    - else None.
    """
    known = set(available)
    for candidate in candidates:
        if candidate is not None and candidate in known:
            return candidate
    return available[0] if available else None
