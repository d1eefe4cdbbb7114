# src/taskboard/core/errors.py

"""
Error taxonomy of the client.

Unknown ids in reducer actions are not errors: the reducer returns the state unchanged.
"""

from __future__ import annotations

from typing import Any


class TaskboardError(Exception):
    """Base class for errors surfaced to the UI layer."""


class NetworkFailure(TaskboardError):
    """Transport failure or non-2xx response from the board API."""

    def __init__(
        self,
        detail: str,
        *,
        status: int | None = None,
        reason: str = "",
        method: str = "",
        path: str = "",
    ) -> None:
        self.detail = detail
        self.status = status
        self.reason = reason
        self.method = method
        self.path = path
        if status is None:
            msg = f"{method} {path} failed: {detail}".strip()
        else:
            head = f"{status} {reason}".strip()
            msg = f"{head}: {detail or 'Request failed'}"
        super().__init__(msg)


class InvalidTimestamp(TaskboardError, ValueError):
    """A task createdAt value could not be parsed."""

    def __init__(self, value: Any, *, task_id: Any = None) -> None:
        self.value = value
        self.task_id = task_id
        super().__init__(f"Invalid createdAt {value!r} on task {task_id!r}")


class InvalidPayload(TaskboardError, ValueError):
    """Server payload does not have the expected Board -> List -> Task shape."""


class NotSignedIn(TaskboardError):
    """An operation needs a user but the state has none yet."""
