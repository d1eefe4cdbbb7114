# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from taskboard.cli.bootstrap import App, create_app
from taskboard.core.store import Store
from taskboard.sync.controller import BoardController

from .fakes import FakeBoardApi


def make_task(task_id: int, list_id: int, title: str = "", *, priority: str = "low", **extra: Any) -> dict[str, Any]:
    task = {
        "id": task_id,
        "title": title or f"Task {task_id}",
        "description": "",
        "priority": priority,
        "listId": list_id,
        "createdAt": "2024-01-01T00:00:00Z",
    }
    task.update(extra)
    return task


def make_list(list_id: int, board_id: int, tasks: list[dict[str, Any]], title: str = "") -> dict[str, Any]:
    return {
        "id": list_id,
        "title": title or f"List {list_id}",
        "boardId": board_id,
        "taskIds": [t["id"] for t in tasks],
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
        "tasks": tasks,
    }


def make_board(board_id: int, lists: list[dict[str, Any]], title: str = "", user_id: int = 7) -> dict[str, Any]:
    return {
        "id": board_id,
        "title": title or f"Board {board_id}",
        "userId": user_id,
        "listIds": [lst["id"] for lst in lists],
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
        "lists": lists,
    }


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """Minimal settings object for the App and the HTTP transport. Never reads the environment."""
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        api_base_url="http://api.test",
        request_timeout_seconds=2.0,
        data_dir=tmp_path / "data",
        user_name=None,
        user_id=None,
    )


@pytest.fixture()
def demo_payload() -> list[dict[str, Any]]:
    """Two boards: 1 (lists 10, 11 with tasks 100-102) and 2 (list 20 with task 200)."""
    return [
        make_board(
            1,
            [
                make_list(10, 1, [make_task(100, 10, "X"), make_task(101, 10, priority="high")], "Todo"),
                make_list(11, 1, [make_task(102, 11, description="details")], "Done"),
            ],
            "Demo",
        ),
        make_board(2, [make_list(20, 2, [make_task(200, 20, priority="medium")])], "Side"),
    ]


@pytest.fixture()
def api(demo_payload) -> FakeBoardApi:
    return FakeBoardApi(demo_payload)


@pytest.fixture()
def store() -> Store:
    return Store()


@pytest.fixture()
def controller(store: Store, api: FakeBoardApi) -> BoardController:
    return BoardController(store, api)


@pytest.fixture()
def app(settings: SimpleNamespace, api: FakeBoardApi) -> App:
    """App wired with the in-memory board server (no HTTP)."""
    return create_app(settings=settings, api=api)
