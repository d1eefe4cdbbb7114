# src/taskboard/core/reducer.py

"""
Entity reducer.

Pure function: (state, action) -> state. No IO, no network, deterministic.
The input state is never modified; changed maps are copied, untouched ones are shared.

Total: an action that points at an unknown id (or an
unknown action type) returns the very same state object.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from .actions import (
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
    ReorderLists,
    ReorderTasks,
    ReplaceEntities,
    SelectBoard,
    UpdateTask,
)
from .models import ID, AppState, BootstrapStatus, Entities, TaskList
from .selection import resolve_selection

logger = logging.getLogger(__name__)

Handler = Callable[[AppState, Any], AppState]

# (current status, lifecycle event) -> next status. Missing pairs are ignored.
_LIFECYCLE: dict[tuple[BootstrapStatus, str], BootstrapStatus] = {
    (BootstrapStatus.IDLE, "start"): BootstrapStatus.LOADING,
    (BootstrapStatus.LOADING, "start"): BootstrapStatus.LOADING,
    (BootstrapStatus.READY, "start"): BootstrapStatus.LOADING,
    (BootstrapStatus.ERRORED, "start"): BootstrapStatus.LOADING,
    (BootstrapStatus.LOADING, "success"): BootstrapStatus.READY,
    (BootstrapStatus.LOADING, "error"): BootstrapStatus.ERRORED,
}


def transition(state: AppState, action: Action) -> AppState:
    """Apply one action. Returns `state` itself when nothing changes."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown action %s", type(action).__name__)
        return state
    return handler(state, action)


def reduce_all(state: AppState, actions: Iterable[Action]) -> AppState:
    for action in actions:
        state = transition(state, action)
    return state


# ---- helpers ----


def _with_entities(state: AppState, **changes: Any) -> AppState:
    return replace(state, entities=replace(state.entities, **changes))


def _without(mapping: dict[ID, Any], ids: Iterable[ID]) -> dict[ID, Any]:
    drop = set(ids)
    return {k: v for k, v in mapping.items() if k not in drop}


def _move(seq: tuple[ID, ...], source_index: int, target_index: int) -> tuple[ID, ...] | None:
    if not 0 <= source_index < len(seq):
        return None
    items = list(seq)
    moved = items.pop(source_index)
    target_index = max(0, min(target_index, len(items)))
    items.insert(target_index, moved)
    return tuple(items)


def _lifecycle(state: AppState, event: str) -> BootstrapStatus | None:
    nxt = _LIFECYCLE.get((state.status, event))
    if nxt is None:
        logger.debug("Lifecycle event %s ignored in status %s", event, state.status)
    return nxt


# ---- bootstrap lifecycle ----


def _bootstrap_start(state: AppState, action: BootstrapStart) -> AppState:
    nxt = _lifecycle(state, "start")
    if nxt is None:
        return state
    return replace(
        state,
        status=nxt,
        loading=True,
        error=None,
        user_id=state.user_id if action.user_id is None else action.user_id,
        user_name=state.user_name if action.user_name is None else action.user_name,
    )


def _bootstrap_success(state: AppState, action: BootstrapSuccess) -> AppState:
    nxt = _lifecycle(state, "success")
    if nxt is None:
        return state
    return replace(
        state,
        status=nxt,
        loading=False,
        error=None,
        user_id=action.user_id,
        user_name=action.user_name,
        entities=action.entities,
        selected_board_id=action.selected_board_id,
    )


def _bootstrap_error(state: AppState, action: BootstrapError) -> AppState:
    nxt = _lifecycle(state, "error")
    if nxt is None:
        return state
    return replace(state, status=nxt, loading=False, error=action.message)


# ---- selection / replace-all ----


def _select_board(state: AppState, action: SelectBoard) -> AppState:
    # Not validated here: callers only select ids they know exist.
    return replace(state, selected_board_id=action.board_id)


def _replace_entities(state: AppState, action: ReplaceEntities) -> AppState:
    return replace(state, entities=action.entities, selected_board_id=action.selected_board_id)


# ---- renames / task patch ----


def _rename_board(state: AppState, action: RenameBoard) -> AppState:
    board = state.entities.boards.get(action.board_id)
    if board is None:
        return state
    boards = {**state.entities.boards, board.id: replace(board, title=action.title)}
    return _with_entities(state, boards=boards)


def _rename_list(state: AppState, action: RenameList) -> AppState:
    lst = state.entities.lists.get(action.list_id)
    if lst is None:
        return state
    lists = {**state.entities.lists, lst.id: replace(lst, title=action.title)}
    return _with_entities(state, lists=lists)


def _update_task(state: AppState, action: UpdateTask) -> AppState:
    task = state.entities.tasks.get(action.task_id)
    if task is None:
        return state
    patch = dict(action.patch)
    if "description" in patch:
        patch["description"] = patch["description"] or None
    tasks = {**state.entities.tasks, task.id: replace(task, **patch)}
    return _with_entities(state, tasks=tasks)


# ---- deletes (collect descendant ids, then remove) ----


def _delete_task(state: AppState, action: DeleteTask) -> AppState:
    lst = state.entities.lists.get(action.list_id)
    if lst is None or action.task_id not in lst.task_ids:
        return state
    kept = tuple(tid for tid in lst.task_ids if tid != action.task_id)
    lists = {**state.entities.lists, lst.id: replace(lst, task_ids=kept)}
    tasks = _without(state.entities.tasks, [action.task_id])
    return _with_entities(state, lists=lists, tasks=tasks)


def _delete_list(state: AppState, action: DeleteList) -> AppState:
    ents = state.entities
    board = ents.boards.get(action.board_id)
    lst = ents.lists.get(action.list_id)
    if board is None or lst is None or lst.id not in board.list_ids:
        return state

    kept = tuple(lid for lid in board.list_ids if lid != lst.id)
    boards = {**ents.boards, board.id: replace(board, list_ids=kept)}
    lists = _without(ents.lists, [lst.id])
    tasks = _without(ents.tasks, lst.task_ids)
    return _with_entities(state, boards=boards, lists=lists, tasks=tasks)


def _delete_board(state: AppState, action: DeleteBoard) -> AppState:
    ents = state.entities
    board = ents.boards.get(action.board_id)
    if board is None:
        return state

    owned_lists = [ents.lists[lid] for lid in board.list_ids if lid in ents.lists]
    owned_tasks = [tid for lst in owned_lists for tid in lst.task_ids]

    board_order = tuple(bid for bid in ents.board_order if bid != board.id)
    entities = Entities(
        boards=_without(ents.boards, [board.id]),
        lists=_without(ents.lists, [lst.id for lst in owned_lists]),
        tasks=_without(ents.tasks, owned_tasks),
        board_order=board_order,
    )

    selected = state.selected_board_id
    if selected == board.id:
        selected = resolve_selection([], board_order)

    logger.debug(
        "Deleted board %s with lists=%d tasks=%d", board.id, len(owned_lists), len(owned_tasks)
    )
    return replace(state, entities=entities, selected_board_id=selected)


# ---- ordering ----


def _move_task(state: AppState, action: MoveTask) -> AppState:
    ents = state.entities
    src = ents.lists.get(action.source_list_id)
    tgt = ents.lists.get(action.target_list_id)
    if src is None or tgt is None or action.task_id not in src.task_ids:
        return state

    remaining = tuple(tid for tid in src.task_ids if tid != action.task_id)
    base = remaining if src.id == tgt.id else tgt.task_ids
    index = len(base) if action.index is None else max(0, min(action.index, len(base)))
    inserted = base[:index] + (action.task_id,) + base[index:]

    lists: dict[ID, TaskList] = dict(ents.lists)
    if src.id == tgt.id:
        lists[src.id] = replace(src, task_ids=inserted)
    else:
        lists[src.id] = replace(src, task_ids=remaining)
        lists[tgt.id] = replace(tgt, task_ids=inserted)
    return _with_entities(state, lists=lists)


def _reorder_lists(state: AppState, action: ReorderLists) -> AppState:
    board = state.entities.boards.get(action.board_id)
    if board is None:
        return state
    list_ids = _move(board.list_ids, action.source_index, action.target_index)
    if list_ids is None:
        return state
    boards = {**state.entities.boards, board.id: replace(board, list_ids=list_ids)}
    return _with_entities(state, boards=boards)


def _reorder_tasks(state: AppState, action: ReorderTasks) -> AppState:
    lst = state.entities.lists.get(action.list_id)
    if lst is None:
        return state
    task_ids = _move(lst.task_ids, action.source_index, action.target_index)
    if task_ids is None:
        return state
    lists = {**state.entities.lists, lst.id: replace(lst, task_ids=task_ids)}
    return _with_entities(state, lists=lists)


_HANDLERS: dict[type, Handler] = {
    BootstrapStart: _bootstrap_start,
    BootstrapSuccess: _bootstrap_success,
    BootstrapError: _bootstrap_error,
    SelectBoard: _select_board,
    ReplaceEntities: _replace_entities,
    RenameBoard: _rename_board,
    RenameList: _rename_list,
    UpdateTask: _update_task,
    DeleteTask: _delete_task,
    DeleteList: _delete_list,
    DeleteBoard: _delete_board,
    MoveTask: _move_task,
    ReorderLists: _reorder_lists,
    ReorderTasks: _reorder_tasks,
}
