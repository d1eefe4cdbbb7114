# src/taskboard/api/board_api.py

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..core.errors import InvalidPayload
from ..core.models import ID
from ..core.ports import JSON, Transport

logger = logging.getLogger(__name__)


class HttpBoardApi:
    """
    Board server REST surface as awaitables.

    The transport is blocking (requests), so each call runs in a worker thread;
    the event loop stays free to dispatch unrelated actions meanwhile.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def _call(self, path: str, method: str = "GET", body: dict[str, Any] | None = None) -> JSON:
        return await asyncio.to_thread(self._transport.request, path, method, body)

    # ---- users ----

    async def create_user(self, name: str) -> dict[str, Any]:
        data = await self._call("/user/create", "POST", {"name": name})
        if not isinstance(data, dict) or "id" not in data:
            raise InvalidPayload(f"create user returned {data!r}")
        return data

    # ---- boards ----

    async def get_boards(self, user_id: ID) -> list[Any]:
        data = await self._call(f"/board/get-boards/{user_id}")
        if data is None:
            return []
        if not isinstance(data, list):
            raise InvalidPayload(f"get-boards returned {type(data).__name__}, expected an array")
        return data

    async def create_board(self, title: str, user_id: ID) -> JSON:
        return await self._call("/board/create", "POST", {"title": title, "userId": user_id})

    async def update_board(self, board_id: ID, fields: dict[str, Any]) -> JSON:
        return await self._call(f"/board/update/{board_id}", "PUT", dict(fields))

    async def delete_board(self, board_id: ID) -> JSON:
        return await self._call(f"/board/delete/{board_id}", "DELETE")

    # ---- lists ----

    async def create_list(self, title: str, board_id: ID) -> JSON:
        return await self._call("/list/create", "POST", {"title": title, "boardId": board_id})

    async def update_list(self, list_id: ID, fields: dict[str, Any]) -> JSON:
        return await self._call(f"/list/update/{list_id}", "PUT", dict(fields))

    async def delete_list(self, list_id: ID) -> JSON:
        return await self._call(f"/list/delete/{list_id}", "DELETE")

    # ---- tasks ----

    async def create_task(self, title: str, description: str, priority: str, list_id: ID) -> JSON:
        body = {
            "title": title,
            "description": description,
            "priority": str(priority),
            "listId": list_id,
        }
        return await self._call("/task/create", "POST", body)

    async def update_task(self, task_id: ID, fields: dict[str, Any]) -> JSON:
        body = dict(fields)
        if "priority" in body:
            body["priority"] = str(body["priority"])
        if "description" in body and body["description"] is None:
            body["description"] = ""
        return await self._call(f"/task/update/{task_id}", "PUT", body)

    async def delete_task(self, task_id: ID) -> JSON:
        return await self._call(f"/task/delete/{task_id}", "DELETE")
