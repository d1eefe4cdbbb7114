# src/taskboard/core/normalizer.py

"""
Server payload <-> normalized entities.

normalize_boards() is a full replace: the result holds exactly the entities found in
the payload, so anything missing from a fresh snapshot disappears from the client.
Embedded `lists`/`tasks` arrays are authoritative for order; the redundant
`listIds`/`taskIds` fields sent by the server are ignored.
An id that appears twice in one snapshot makes the whole payload invalid.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from .errors import InvalidPayload, InvalidTimestamp
from .models import ID, Board, Entities, Priority, Task, TaskList

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def parse_timestamp(value: Any, *, task_id: Any = None) -> int:
    """
    Parse an ISO-8601 timestamp into epoch milliseconds.

    A trailing "Z" means UTC; naive timestamps are read as UTC.
    Numbers are taken as epoch milliseconds already.
    """
    if isinstance(value, bool):
        raise InvalidTimestamp(value, task_id=task_id)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidTimestamp(value, task_id=task_id)
        return int(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestamp(value, task_id=task_id)

    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidTimestamp(value, task_id=task_id) from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (dt - _EPOCH) // _ONE_MS


def format_timestamp(epoch_ms: int) -> str:
    dt = _EPOCH + timedelta(milliseconds=epoch_ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _clean_description(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw)
    return text or None


def _require(obj: Any, key: str, kind: str) -> Any:
    if not isinstance(obj, Mapping):
        raise InvalidPayload(f"{kind} payload must be an object, got {type(obj).__name__}")
    if key not in obj:
        raise InvalidPayload(f"{kind} payload is missing {key!r}")
    return obj[key]


def _children(obj: Mapping[str, Any], key: str, kind: str) -> list[Any]:
    raw = obj.get(key) or []
    if not isinstance(raw, list):
        raise InvalidPayload(f"{kind} payload field {key!r} must be an array")
    return raw


def _priority(raw: Any, task_id: Any) -> Priority:
    try:
        return Priority(raw)
    except ValueError as e:
        raise InvalidPayload(f"Unknown priority {raw!r} on task {task_id!r}") from e


def _normalize_task(raw: Any) -> Task:
    task_id = _require(raw, "id", "Task")
    return Task(
        id=task_id,
        title=str(_require(raw, "title", "Task")),
        description=_clean_description(raw.get("description")),
        priority=_priority(_require(raw, "priority", "Task"), task_id),
        created_at=parse_timestamp(raw.get("createdAt"), task_id=task_id),
    )


def normalize_boards(server_boards: Iterable[Any]) -> Entities:
    """Flatten nested Board -> List -> Task payloads into fresh entity maps."""
    if isinstance(server_boards, (str, bytes, Mapping)) or not isinstance(server_boards, Iterable):
        raise InvalidPayload("Boards payload must be an array")

    boards: dict[ID, Board] = {}
    lists: dict[ID, TaskList] = {}
    tasks: dict[ID, Task] = {}
    board_order: list[ID] = []

    for raw_board in server_boards:
        board_id = _require(raw_board, "id", "Board")
        if board_id in boards:
            raise InvalidPayload(f"Board {board_id!r} appears more than once")
        list_ids: list[ID] = []

        for raw_list in _children(raw_board, "lists", "Board"):
            list_id = _require(raw_list, "id", "List")
            if list_id in lists:
                raise InvalidPayload(f"List {list_id!r} appears more than once")
            task_ids: list[ID] = []

            for raw_task in _children(raw_list, "tasks", "List"):
                task = _normalize_task(raw_task)
                if task.id in tasks:
                    raise InvalidPayload(f"Task {task.id!r} appears more than once")
                task_ids.append(task.id)
                tasks[task.id] = task

            lists[list_id] = TaskList(
                id=list_id,
                title=str(_require(raw_list, "title", "List")),
                task_ids=tuple(task_ids),
            )
            list_ids.append(list_id)

        boards[board_id] = Board(
            id=board_id,
            title=str(_require(raw_board, "title", "Board")),
            list_ids=tuple(list_ids),
        )
        board_order.append(board_id)

    logger.debug(
        "Normalized boards=%d lists=%d tasks=%d", len(boards), len(lists), len(tasks)
    )
    return Entities(boards=boards, lists=lists, tasks=tasks, board_order=tuple(board_order))


def denormalize(entities: Entities) -> list[dict[str, Any]]:
    """
    Shape entities back into nested server payloads (boards in board_order).

    normalize_boards(denormalize(e)) == e for entities that satisfy the integrity rules.
    """
    out: list[dict[str, Any]] = []
    for board_id in entities.board_order:
        board = entities.boards[board_id]
        raw_lists: list[dict[str, Any]] = []
        for list_id in board.list_ids:
            lst = entities.lists[list_id]
            raw_tasks = [
                {
                    "id": t.id,
                    "title": t.title,
                    "description": t.description or "",
                    "priority": str(t.priority),
                    "listId": lst.id,
                    "createdAt": format_timestamp(t.created_at),
                }
                for t in (entities.tasks[tid] for tid in lst.task_ids)
            ]
            raw_lists.append(
                {
                    "id": lst.id,
                    "title": lst.title,
                    "boardId": board.id,
                    "taskIds": list(lst.task_ids),
                    "tasks": raw_tasks,
                }
            )
        out.append(
            {
                "id": board.id,
                "title": board.title,
                "listIds": list(board.list_ids),
                "lists": raw_lists,
            }
        )
    return out
