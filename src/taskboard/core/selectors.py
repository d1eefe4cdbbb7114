# src/taskboard/core/selectors.py

"""
Read-only views over AppState (what a UI renders) plus an integrity checker.

integrity_violations() reports broken references instead of raising, so callers can
log or assert on the full list.
"""

from __future__ import annotations

from collections import Counter

from .models import ID, AppState, Board, Entities, Task, TaskList


def boards_in_order(state: AppState) -> list[Board]:
    boards = state.entities.boards
    return [boards[bid] for bid in state.entities.board_order if bid in boards]


def selected_board(state: AppState) -> Board | None:
    if state.selected_board_id is None:
        return None
    return state.entities.boards.get(state.selected_board_id)


def lists_for_board(state: AppState, board_id: ID) -> list[TaskList]:
    board = state.entities.boards.get(board_id)
    if board is None:
        return []
    lists = state.entities.lists
    return [lists[lid] for lid in board.list_ids if lid in lists]


def tasks_for_list(state: AppState, list_id: ID) -> list[Task]:
    lst = state.entities.lists.get(list_id)
    if lst is None:
        return []
    tasks = state.entities.tasks
    return [tasks[tid] for tid in lst.task_ids if tid in tasks]


def find_list_of_task(state: AppState, task_id: ID) -> TaskList | None:
    for lst in state.entities.lists.values():
        if task_id in lst.task_ids:
            return lst
    return None


def find_board_of_list(state: AppState, list_id: ID) -> Board | None:
    for board in state.entities.boards.values():
        if list_id in board.list_ids:
            return board
    return None


def integrity_violations(entities: Entities, selected_board_id: ID | None = None) -> list[str]:
    problems: list[str] = []

    task_refs: Counter[ID] = Counter()
    for lst in entities.lists.values():
        if len(set(lst.task_ids)) != len(lst.task_ids):
            problems.append(f"list {lst.id} has duplicate task ids")
        for tid in lst.task_ids:
            task_refs[tid] += 1
            if tid not in entities.tasks:
                problems.append(f"list {lst.id} references missing task {tid}")

    list_refs: Counter[ID] = Counter()
    for board in entities.boards.values():
        if len(set(board.list_ids)) != len(board.list_ids):
            problems.append(f"board {board.id} has duplicate list ids")
        for lid in board.list_ids:
            list_refs[lid] += 1
            if lid not in entities.lists:
                problems.append(f"board {board.id} references missing list {lid}")

    problems.extend(f"task {tid} has {n} parents" for tid, n in task_refs.items() if n > 1)
    problems.extend(f"list {lid} has {n} parents" for lid, n in list_refs.items() if n > 1)

    if selected_board_id is not None and selected_board_id not in entities.boards:
        problems.append(f"selected board {selected_board_id} does not exist")

    if len(set(entities.board_order)) != len(entities.board_order) or set(entities.board_order) != set(
        entities.boards
    ):
        problems.append("board_order does not match boards")

    return problems
