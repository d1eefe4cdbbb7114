# src/taskboard/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypedDict

ID = int


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BootstrapStatus(StrEnum):
    """
    Bootstrap lifecycle of the client.

    idle -> loading -> ready | errored; ready and errored accept a new start (retry).
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class TaskPatch(TypedDict, total=False):
    """Editable task fields. id and created_at never change after creation."""

    title: str
    description: str | None
    priority: Priority


TASK_PATCH_FIELDS = frozenset(TaskPatch.__annotations__)


@dataclass(frozen=True, slots=True)
class Task:
    id: ID
    title: str
    priority: Priority
    created_at: int  # epoch milliseconds
    description: str | None = None


@dataclass(frozen=True, slots=True)
class TaskList:
    id: ID
    title: str
    task_ids: tuple[ID, ...] = ()


@dataclass(frozen=True, slots=True)
class Board:
    id: ID
    title: str
    list_ids: tuple[ID, ...] = ()


@dataclass(frozen=True, slots=True)
class Entities:
    """
    Normalized entity maps.

    Mapping order carries no meaning. Child order lives in list_ids/task_ids,
    board order lives in board_order (same ids as boards, no duplicates).
    """

    boards: dict[ID, Board] = field(default_factory=dict)
    lists: dict[ID, TaskList] = field(default_factory=dict)
    tasks: dict[ID, Task] = field(default_factory=dict)
    board_order: tuple[ID, ...] = ()


@dataclass(frozen=True, slots=True)
class AppState:
    user_id: ID | None = None
    user_name: str | None = None
    status: BootstrapStatus = BootstrapStatus.IDLE
    loading: bool = False
    error: str | None = None
    selected_board_id: ID | None = None
    entities: Entities = field(default_factory=Entities)


def initial_state() -> AppState:
    return AppState()
