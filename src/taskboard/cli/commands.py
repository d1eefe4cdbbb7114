# src/taskboard/cli/commands.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..core.errors import TaskboardError
from ..core.models import ID, AppState, BootstrapStatus, Priority, TaskPatch
from ..core.selectors import (
    boards_in_order,
    find_board_of_list,
    find_list_of_task,
    lists_for_board,
    selected_board,
    tasks_for_list,
)

if TYPE_CHECKING:
    from .bootstrap import App

CommandHandler = Callable[["App", list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /boards, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, app: App, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Expected failures (bad input, server errors) become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(app, args)
        except TaskboardError as e:
            logger.info("/%s failed: %s", name, e)
            return f"Error: {e}"
        except ValueError as e:
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _run(coro: Coroutine[Any, Any, AppState]) -> AppState:
    return asyncio.run(coro)


def _int_arg(args: list[str], pos: int, what: str) -> ID:
    try:
        return int(args[pos])
    except IndexError:
        raise ValueError(f"missing {what}") from None
    except ValueError:
        raise ValueError(f"{what} must be a number, got {args[pos]!r}") from None


def _fmt_date(epoch_ms: int) -> str:
    try:
        return datetime.fromtimestamp(epoch_ms / 1000).astimezone().strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return "?"


def render_board(state: AppState) -> str:
    board = selected_board(state)
    if board is None:
        if state.loading:
            return "Loading boards..."
        if not state.entities.boards:
            return "You don't have any boards yet. Use /board new <title> to add one."
        return "No board selected. Use /select <id>."

    lines = [f"== {board.title} (#{board.id}) =="]
    lists = lists_for_board(state, board.id)
    if not lists:
        lines.append("  (no lists yet, use /list new <title>)")
    for lst in lists:
        tasks = tasks_for_list(state, lst.id)
        lines.append(f"  [{lst.id}] {lst.title} ({len(tasks)})")
        for t in tasks:
            desc = f" - {t.description}" if t.description else ""
            lines.append(f"      #{t.id} [{t.priority}] {t.title}{desc}  ({_fmt_date(t.created_at)})")
    return "\n".join(lines)


def cmd_help(app: App, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(app: App, args: list[str]) -> str:
    s = app.store.state
    api_base = getattr(app.settings, "api_base_url", "?")
    return (
        "Status:\n"
        f"  User: {s.user_name or '-'} (id={s.user_id if s.user_id is not None else '-'})\n"
        f"  Bootstrap: {s.status}{' - ' + s.error if s.error else ''}\n"
        f"  API: {api_base}\n"
        f"  Boards: {len(s.entities.boards)}  Lists: {len(s.entities.lists)}  Tasks: {len(s.entities.tasks)}"
    )


def cmd_boards(app: App, args: list[str]) -> str:
    state = app.store.state
    boards = boards_in_order(state)
    if not boards:
        return "No boards."
    lines = ["Boards:"]
    for b in boards:
        mark = "*" if b.id == state.selected_board_id else " "
        lines.append(f" {mark} [{b.id}] {b.title}")
    return "\n".join(lines)


def cmd_select(app: App, args: list[str]) -> str:
    board_id = _int_arg(args, 0, "board id")
    app.controller.select_board(board_id)
    return render_board(app.store.state)


def cmd_show(app: App, args: list[str]) -> str:
    return render_board(app.store.state)


def cmd_refresh(app: App, args: list[str]) -> str:
    state = _run(app.controller.refresh())
    if state.status == BootstrapStatus.ERRORED:
        return f"Load failed: {state.error}. Use /refresh to retry."
    return render_board(state)


def cmd_board(app: App, args: list[str]) -> str:
    """
    /board new <title>
    /board rename <id> <title>
    /board delete <id>
    """
    sub = args[0].lower() if args else ""

    if sub == "new":
        _run(app.controller.create_board(" ".join(args[1:])))
        return render_board(app.store.state)

    if sub == "rename":
        board_id = _int_arg(args, 1, "board id")
        _run(app.controller.rename_board(board_id, " ".join(args[2:])))
        return f"Board {board_id} renamed."

    if sub == "delete":
        board_id = _int_arg(args, 1, "board id")
        _run(app.controller.delete_board(board_id))
        return f"Board {board_id} deleted (with its lists and tasks)."

    return "Usage: /board new <title> | /board rename <id> <title> | /board delete <id>"


def cmd_list(app: App, args: list[str]) -> str:
    """
    /list new <title>          (on the selected board)
    /list rename <id> <title>
    /list delete <id>
    """
    sub = args[0].lower() if args else ""
    state = app.store.state

    if sub == "new":
        board = selected_board(state)
        if board is None:
            return "Select a board first (/select <id>)."
        _run(app.controller.create_list(board.id, " ".join(args[1:])))
        return render_board(app.store.state)

    if sub == "rename":
        list_id = _int_arg(args, 1, "list id")
        _run(app.controller.rename_list(list_id, " ".join(args[2:])))
        return f"List {list_id} renamed."

    if sub == "delete":
        list_id = _int_arg(args, 1, "list id")
        owner = find_board_of_list(state, list_id)
        if owner is None:
            return f"Unknown list {list_id}."
        _run(app.controller.delete_list(owner.id, list_id))
        return f"List {list_id} deleted (with its tasks)."

    return "Usage: /list new <title> | /list rename <id> <title> | /list delete <id>"


def cmd_task(app: App, args: list[str]) -> str:
    """
    /task new <list_id> <low|medium|high> <title> [| description]
    /task edit <id> title|desc|priority <value>
    /task move <id> <list_id> [position]
    /task delete <id>
    """
    sub = args[0].lower() if args else ""
    state = app.store.state

    if sub == "new":
        list_id = _int_arg(args, 1, "list id")
        if len(args) < 3:
            raise ValueError("missing priority")
        title, _, description = " ".join(args[3:]).partition("|")
        _run(app.controller.create_task(list_id, title, description, Priority(args[2].lower())))
        return render_board(app.store.state)

    if sub == "edit":
        task_id = _int_arg(args, 1, "task id")
        field = args[2].lower() if len(args) > 2 else ""
        value = " ".join(args[3:]).strip()
        patch: TaskPatch
        if field == "title":
            if not value:
                raise ValueError("title cannot be empty")
            patch = {"title": value}
        elif field in ("desc", "description"):
            patch = {"description": value or None}
        elif field == "priority":
            patch = {"priority": Priority(value.lower())}
        else:
            return "Usage: /task edit <id> title|desc|priority <value>"
        _run(app.controller.update_task(task_id, patch))
        return f"Task {task_id} updated."

    if sub == "move":
        task_id = _int_arg(args, 1, "task id")
        target = _int_arg(args, 2, "list id")
        index = _int_arg(args, 3, "position") if len(args) > 3 else None
        _run(app.controller.move_task(task_id, target, index))
        return render_board(app.store.state)

    if sub == "delete":
        task_id = _int_arg(args, 1, "task id")
        owner = find_list_of_task(state, task_id)
        if owner is None:
            return f"Unknown task {task_id}."
        _run(app.controller.delete_task(owner.id, task_id))
        return f"Task {task_id} deleted."

    return (
        "Usage:\n"
        "  /task new <list_id> <low|medium|high> <title> [| description]\n"
        "  /task edit <id> title|desc|priority <value>\n"
        "  /task move <id> <list_id> [position]\n"
        "  /task delete <id>"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show user, bootstrap status and counts.")
registry.register("boards", cmd_boards, help_text="List boards (* marks the selected one).")
registry.register("select", cmd_select, help_text="Select a board: /select <id>.")
registry.register("show", cmd_show, help_text="Show the selected board.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload everything from the server.")
registry.register("board", cmd_board, help_text="Boards: /board new|rename|delete.")
registry.register("list", cmd_list, help_text="Lists: /list new|rename|delete.")
registry.register("task", cmd_task, help_text="Tasks: /task new|edit|move|delete.")
