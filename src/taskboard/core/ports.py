# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on these Protocols instead of the HTTP adapter,
so tests can swap in in-memory fakes.
"""

from typing import Any, Protocol

from .models import ID, TaskPatch

JSON = Any
# Decoded JSON body (dict / list / scalar) or None for empty replies.


class Transport(Protocol):
    """Opaque request(path, method, body) -> JSON; raises NetworkFailure on failure."""

    def request(self, path: str, method: str = "GET", body: dict[str, Any] | None = None) -> JSON: ...


class BoardApi(Protocol):
    """REST surface of the board server, as awaitables."""

    async def create_user(self, name: str) -> dict[str, Any]: ...
    async def get_boards(self, user_id: ID) -> list[Any]: ...

    async def create_board(self, title: str, user_id: ID) -> JSON: ...
    async def update_board(self, board_id: ID, fields: dict[str, Any]) -> JSON: ...
    async def delete_board(self, board_id: ID) -> JSON: ...

    async def create_list(self, title: str, board_id: ID) -> JSON: ...
    async def update_list(self, list_id: ID, fields: dict[str, Any]) -> JSON: ...
    async def delete_list(self, list_id: ID) -> JSON: ...

    async def create_task(
            self,
            title: str,
            description: str,
            priority: str,
            list_id: ID,
    ) -> JSON: ...
    async def update_task(self, task_id: ID, fields: TaskPatch | dict[str, Any]) -> JSON: ...
    async def delete_task(self, task_id: ID) -> JSON: ...
