# tests/test_commands.py

from __future__ import annotations

import asyncio

from taskboard.cli.commands import CommandRegistry, registry, render_board
from taskboard.core.errors import NetworkFailure


def _ready(app) -> None:
    asyncio.run(app.controller.bootstrap(7, "Ann"))


def test_command_registry_routes_with_aliases(app) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def handler(app, args):
        seen.append(args)
        return "ok"

    reg.register("Echo", handler, "echo", aliases=["e"])

    assert reg.handle(app, "/echo a b") == "ok"
    assert reg.handle(app, "/E c") == "ok"
    assert seen == [["a", "b"], ["c"]]
    assert "/echo - echo" in reg.build_help()


def test_command_registry_unknown_and_non_command(app) -> None:
    reg = CommandRegistry()
    assert reg.handle(app, "hello") is None
    assert "Unknown command" in (reg.handle(app, "/nope") or "")
    assert "Empty command" in (reg.handle(app, "/") or "")


def test_command_registry_turns_errors_into_replies(app) -> None:
    reg = CommandRegistry()

    def bad_input(app, args):
        raise ValueError("nope")

    def server_down(app, args):
        raise NetworkFailure("down", status=503, reason="Service Unavailable")

    reg.register("a", bad_input, "a")
    reg.register("b", server_down, "b")

    assert reg.handle(app, "/a") == "Invalid input: nope"
    assert reg.handle(app, "/b") == "Error: 503 Service Unavailable: down"


def test_help_lists_board_commands(app) -> None:
    reply = registry.handle(app, "/help") or ""
    for name in ("boards", "select", "board", "list", "task", "refresh"):
        assert f"/{name} -" in reply


def test_commands_need_sign_in(app) -> None:
    assert "sign in first" in (registry.handle(app, "/board new Roadmap") or "")


def test_boards_and_select(app) -> None:
    _ready(app)

    assert registry.handle(app, "/boards") == "Boards:\n * [1] Demo\n   [2] Side"

    reply = registry.handle(app, "/select 2") or ""
    assert reply.startswith("== Side (#2) ==")
    assert app.store.state.selected_board_id == 2

    assert "Unknown board 42" in (registry.handle(app, "/select 42") or "")
    assert "must be a number" in (registry.handle(app, "/select two") or "")


def test_show_renders_lists_and_tasks(app) -> None:
    _ready(app)

    reply = registry.handle(app, "/ls") or ""

    assert "[10] Todo (2)" in reply
    assert "#100 [low] X" in reply
    assert "#102 [low] Task 102 - details" in reply


def test_board_new_selects_created_board(app, api) -> None:
    _ready(app)

    reply = registry.handle(app, "/board new Roadmap Q3") or ""

    assert reply.startswith("== Roadmap Q3 (#1001) ==")
    assert app.store.state.selected_board_id == 1001


def test_board_rename_and_delete(app, api) -> None:
    _ready(app)

    assert registry.handle(app, "/board rename 2 Side project") == "Board 2 renamed."
    assert app.store.state.entities.boards[2].title == "Side project"

    registry.handle(app, "/board delete 1")
    assert app.store.state.selected_board_id == 2
    assert ("delete_board", (1,)) in api.calls


def test_list_and_task_commands(app, api) -> None:
    _ready(app)

    registry.handle(app, "/list new Later")
    new_list = app.store.state.entities.boards[1].list_ids[-1]
    assert app.store.state.entities.lists[new_list].title == "Later"

    registry.handle(app, f"/task new {new_list} high Ship it | before friday")
    tid = app.store.state.entities.lists[new_list].task_ids[-1]
    task = app.store.state.entities.tasks[tid]
    assert (task.title, task.description, task.priority) == ("Ship it", "before friday", "high")

    assert registry.handle(app, f"/task edit {tid} priority low") == f"Task {tid} updated."
    assert app.store.state.entities.tasks[tid].priority == "low"

    registry.handle(app, f"/task move {tid} 10 0")
    assert app.store.state.entities.lists[10].task_ids[0] == tid

    assert registry.handle(app, f"/task delete {tid}") == f"Task {tid} deleted."
    assert tid not in app.store.state.entities.tasks

    assert registry.handle(app, "/list delete 11") == "List 11 deleted (with its tasks)."
    assert 102 not in app.store.state.entities.tasks


def test_task_new_rejects_bad_priority(app, api) -> None:
    _ready(app)
    reply = registry.handle(app, "/task new 10 urgent Something") or ""
    assert reply.startswith("Invalid input:")
    assert "create_task" not in api.call_names()


def test_server_failure_is_reported_and_patch_kept(app, api) -> None:
    _ready(app)
    api.fail["update_list"] = NetworkFailure("nope", status=500, reason="Internal Server Error")

    reply = registry.handle(app, "/list rename 10 Doing") or ""

    assert reply == "Error: 500 Internal Server Error: nope"
    assert app.store.state.entities.lists[10].title == "Doing"


def test_render_board_without_boards(app) -> None:
    assert "don't have any boards" in render_board(app.store.state)


def test_refresh_recovers_after_failed_sign_in(app, api) -> None:
    api.fail["get_boards"] = NetworkFailure("down", status=503, reason="Service Unavailable")
    asyncio.run(app.controller.sign_in("Ann"))
    assert app.store.state.status == "errored"

    reply = registry.handle(app, "/refresh") or ""
    assert reply == "Load failed: 503 Service Unavailable: down. Use /refresh to retry."

    del api.fail["get_boards"]
    reply = registry.handle(app, "/refresh") or ""

    assert reply.startswith("== Demo (#1) ==")
    state = app.store.state
    assert state.status == "ready"
    assert state.error is None
    assert state.user_name == "Ann"


def test_show_survives_out_of_range_dates(app, api) -> None:
    api.boards[0]["lists"][0]["tasks"][0]["createdAt"] = 1e300
    _ready(app)

    reply = registry.handle(app, "/show") or ""

    assert "#100 [low] X  (?)" in reply
