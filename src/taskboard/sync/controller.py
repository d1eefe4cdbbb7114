# src/taskboard/sync/controller.py

from __future__ import annotations

"""
Reconciliation controller.

Keeps the Store consistent with server truth after mutating network calls:

- create board / list / task -> POST, then refetch the full graph, normalize, and
  dispatch a replace-all that preserves the selection where possible,
- rename / delete / task edits -> optimistic local patch first, then the network call.
  A failing call is re-raised but the local patch stays (no rollback); the next
  reconcile brings the client back to server truth.

Reconciliations are not coordinated: the one that completes last wins, and in-flight
fetches are never cancelled.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.actions import (
    Action,
    BootstrapError,
    BootstrapStart,
    BootstrapSuccess,
    DeleteBoard,
    DeleteList,
    DeleteTask,
    MoveTask,
    RenameBoard,
    RenameList,
    ReplaceEntities,
    SelectBoard,
    UpdateTask,
)
from ..core.errors import NetworkFailure, NotSignedIn, TaskboardError
from ..core.models import ID, AppState, BootstrapStatus, Priority, TaskPatch
from ..core.normalizer import normalize_boards
from ..core.ports import BoardApi
from ..core.selection import resolve_selection
from ..core.selectors import find_list_of_task
from ..core.store import Store

logger = logging.getLogger(__name__)


def _required_title(title: str, what: str) -> str:
    clean = (title or "").strip()
    if not clean:
        raise ValueError(f"{what} title is required")
    return clean


class BoardController:
    def __init__(self, store: Store, api: BoardApi) -> None:
        self._store = store
        self._api = api

    @property
    def state(self) -> AppState:
        return self._store.state

    def _require_user(self) -> ID:
        user_id = self._store.state.user_id
        if user_id is None:
            raise NotSignedIn("No user yet: sign in first.")
        return user_id

    # ---- bootstrap lifecycle ----

    async def sign_in(self, name: str) -> AppState:
        """Create the user on the server, then load their boards."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Please enter your name")

        user = await self._api.create_user(name)
        user_id = user["id"]
        logger.info("Signed in as user_id=%s", user_id)
        return await self.bootstrap(user_id, str(user.get("name") or name))

    async def bootstrap(self, user_id: ID, user_name: str) -> AppState:
        """
        Initial load: idle/ready/errored -> loading -> ready | errored.

        Failures are captured into the errored state (message kept for the UI), not raised.
        """
        self._store.dispatch(BootstrapStart(user_id=user_id, user_name=user_name))
        try:
            raw = await self._api.get_boards(user_id)
            entities = normalize_boards(raw)
        except TaskboardError as e:
            logger.warning("Bootstrap failed for user_id=%s: %s", user_id, e)
            return self._store.dispatch(BootstrapError(str(e) or "Failed to load boards"))

        # A retry keeps the board that was selected before, when it still exists.
        selected = resolve_selection([self._store.state.selected_board_id], entities.board_order)
        logger.info("Bootstrap ok user_id=%s boards=%d selected=%s", user_id, len(entities.boards), selected)
        return self._store.dispatch(
            BootstrapSuccess(
                user_id=user_id,
                user_name=user_name,
                entities=entities,
                selected_board_id=selected,
            )
        )

    # ---- reconciliation ----

    async def reconcile(self, user_id: ID | None = None, preferred_board_id: ID | None = None) -> AppState:
        """
        Refetch the full board graph and replace local entities wholesale.

        Selection: preferred_board_id if present in the snapshot, else the current
        selection (read after the fetch, so changes made meanwhile count) if still
        present, else the first board of the snapshot, else None.
        """
        if user_id is None:
            user_id = self._require_user()

        raw = await self._api.get_boards(user_id)
        entities = normalize_boards(raw)

        current = self._store.state.selected_board_id
        selected = resolve_selection([preferred_board_id, current], entities.board_order)
        logger.info(
            "Reconciled user_id=%s boards=%d lists=%d tasks=%d selected=%s",
            user_id,
            len(entities.boards),
            len(entities.lists),
            len(entities.tasks),
            selected,
        )
        return self._store.dispatch(ReplaceEntities(entities=entities, selected_board_id=selected))

    async def refresh(self) -> AppState:
        """
        Reload from the server.

        Before a successful first load (idle or errored) this re-runs bootstrap for the
        recorded user, so the lifecycle can reach ready; afterwards it reconciles.
        """
        state = self._store.state
        if state.status in (BootstrapStatus.IDLE, BootstrapStatus.ERRORED):
            user_id = self._require_user()
            return await self.bootstrap(user_id, state.user_name or f"user {user_id}")
        return await self.reconcile()

    def select_board(self, board_id: ID) -> AppState:
        if board_id not in self._store.state.entities.boards:
            raise ValueError(f"Unknown board {board_id}")
        return self._store.dispatch(SelectBoard(board_id))

    # ---- create (server first, then reconcile) ----

    async def create_board(self, title: str) -> AppState:
        user_id = self._require_user()
        created = await self._api.create_board(_required_title(title, "Board"), user_id)
        created_id = created.get("id") if isinstance(created, dict) else None
        return await self.reconcile(user_id, preferred_board_id=created_id)

    async def create_list(self, board_id: ID, title: str) -> AppState:
        user_id = self._require_user()
        await self._api.create_list(_required_title(title, "List"), board_id)
        return await self.reconcile(user_id)

    async def create_task(
        self,
        list_id: ID,
        title: str,
        description: str = "",
        priority: Priority | str = Priority.LOW,
    ) -> AppState:
        user_id = self._require_user()
        await self._api.create_task(
            _required_title(title, "Task"),
            (description or "").strip(),
            Priority(priority),
            list_id,
        )
        return await self.reconcile(user_id)

    # ---- optimistic patches (local first, no rollback) ----

    async def _optimistic(self, action: Action, call: Callable[[], Awaitable[Any]], what: str) -> AppState:
        self._store.dispatch(action)
        try:
            await call()
        except NetworkFailure as e:
            logger.warning("%s failed on the server (%s); local change kept until next refresh", what, e)
            raise
        return self._store.state

    async def rename_board(self, board_id: ID, title: str) -> AppState:
        title = _required_title(title, "Board")
        return await self._optimistic(
            RenameBoard(board_id, title),
            lambda: self._api.update_board(board_id, {"title": title}),
            f"rename board {board_id}",
        )

    async def delete_board(self, board_id: ID) -> AppState:
        return await self._optimistic(
            DeleteBoard(board_id),
            lambda: self._api.delete_board(board_id),
            f"delete board {board_id}",
        )

    async def rename_list(self, list_id: ID, title: str) -> AppState:
        title = _required_title(title, "List")
        return await self._optimistic(
            RenameList(list_id, title),
            lambda: self._api.update_list(list_id, {"title": title}),
            f"rename list {list_id}",
        )

    async def delete_list(self, board_id: ID, list_id: ID) -> AppState:
        return await self._optimistic(
            DeleteList(board_id, list_id),
            lambda: self._api.delete_list(list_id),
            f"delete list {list_id}",
        )

    async def update_task(self, task_id: ID, patch: TaskPatch) -> AppState:
        action = UpdateTask(task_id, patch)
        return await self._optimistic(
            action,
            lambda: self._api.update_task(task_id, dict(action.patch)),
            f"update task {task_id}",
        )

    async def delete_task(self, list_id: ID, task_id: ID) -> AppState:
        return await self._optimistic(
            DeleteTask(list_id, task_id),
            lambda: self._api.delete_task(task_id),
            f"delete task {task_id}",
        )

    async def move_task(self, task_id: ID, target_list_id: ID, index: int | None = None) -> AppState:
        source = find_list_of_task(self._store.state, task_id)
        if source is None:
            raise ValueError(f"Task {task_id} is not on any list")
        if target_list_id not in self._store.state.entities.lists:
            raise ValueError(f"Unknown list {target_list_id}")
        return await self._optimistic(
            MoveTask(task_id, source.id, target_list_id, index),
            lambda: self._api.update_task(task_id, {"listId": target_list_id}),
            f"move task {task_id}",
        )
