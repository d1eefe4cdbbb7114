# src/taskboard/core/actions.py

from __future__ import annotations

from dataclasses import dataclass, field

from .models import ID, TASK_PATCH_FIELDS, Entities, Priority, TaskPatch


@dataclass(frozen=True, slots=True)
class BootstrapStart:
    """Begin loading for a user. Reducer records the user here, before the fetch."""

    user_id: ID | None = None
    user_name: str | None = None


@dataclass(frozen=True, slots=True)
class BootstrapSuccess:
    user_id: ID
    user_name: str
    entities: Entities
    selected_board_id: ID | None


@dataclass(frozen=True, slots=True)
class BootstrapError:
    message: str


@dataclass(frozen=True, slots=True)
class SelectBoard:
    board_id: ID


@dataclass(frozen=True, slots=True)
class ReplaceEntities:
    """Replace-all from a fresh server snapshot. Never merged with prior entities."""

    entities: Entities
    selected_board_id: ID | None


@dataclass(frozen=True, slots=True)
class RenameBoard:
    board_id: ID
    title: str


@dataclass(frozen=True, slots=True)
class RenameList:
    list_id: ID
    title: str


@dataclass(frozen=True, slots=True)
class UpdateTask:
    task_id: ID
    patch: TaskPatch = field(default_factory=dict)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        bad = set(self.patch) - TASK_PATCH_FIELDS
        if bad:
            raise ValueError(f"UpdateTask patch cannot change: {', '.join(sorted(bad))}")
        if "priority" in self.patch:
            patch = dict(self.patch)
            patch["priority"] = Priority(patch["priority"])
            object.__setattr__(self, "patch", patch)


@dataclass(frozen=True, slots=True)
class DeleteTask:
    list_id: ID
    task_id: ID


@dataclass(frozen=True, slots=True)
class DeleteList:
    board_id: ID
    list_id: ID


@dataclass(frozen=True, slots=True)
class DeleteBoard:
    board_id: ID


@dataclass(frozen=True, slots=True)
class MoveTask:
    task_id: ID
    source_list_id: ID
    target_list_id: ID
    index: int | None = None  # None appends


@dataclass(frozen=True, slots=True)
class ReorderLists:
    board_id: ID
    source_index: int
    target_index: int


@dataclass(frozen=True, slots=True)
class ReorderTasks:
    list_id: ID
    source_index: int
    target_index: int


Action = (
    BootstrapStart
    | BootstrapSuccess
    | BootstrapError
    | SelectBoard
    | ReplaceEntities
    | RenameBoard
    | RenameList
    | UpdateTask
    | DeleteTask
    | DeleteList
    | DeleteBoard
    | MoveTask
    | ReorderLists
    | ReorderTasks
)
