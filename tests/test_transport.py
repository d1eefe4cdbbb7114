# tests/test_transport.py

from __future__ import annotations

import pytest
import requests

from taskboard.api.board_api import HttpBoardApi
from taskboard.api.transport import HttpTransport
from taskboard.core.errors import InvalidPayload, NetworkFailure
from taskboard.core.models import Priority

from .fakes import FakeResponse, FakeSession


def _transport(*responses) -> tuple[HttpTransport, FakeSession]:
    session = FakeSession(*responses)
    return HttpTransport("http://api.test/", session=session, timeout=3.0), session


def test_get_returns_decoded_json() -> None:
    transport, session = _transport(FakeResponse(200, [{"id": 1}]))

    assert transport.request("/board/get-boards/7") == [{"id": 1}]

    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "http://api.test/board/get-boards/7"
    assert sent["json"] is None
    assert sent["timeout"] == 3.0
    assert sent["headers"]["Content-Type"] == "application/json"


def test_post_sends_json_body() -> None:
    transport, session = _transport(FakeResponse(201, {"id": 5, "title": "A"}, reason="Created"))

    assert transport.request("/board/create", "post", {"title": "A", "userId": 7}) == {"id": 5, "title": "A"}
    assert session.requests[0]["method"] == "POST"
    assert session.requests[0]["json"] == {"title": "A", "userId": 7}


def test_non_json_reply_is_none() -> None:
    transport, _ = _transport(FakeResponse(200, None, content_type=""))
    assert transport.request("/task/delete/1", "DELETE") is None


def test_error_status_raises_with_body() -> None:
    transport, _ = _transport(FakeResponse(404, None, text="Board not found", reason="Not Found"))

    with pytest.raises(NetworkFailure) as info:
        transport.request("/board/update/9", "PUT", {"title": "x"})

    err = info.value
    assert (err.status, err.reason, err.method, err.path) == (404, "Not Found", "PUT", "/board/update/9")
    assert str(err) == "404 Not Found: Board not found"


def test_error_status_without_body_uses_default_detail() -> None:
    transport, _ = _transport(FakeResponse(500, None, reason="Internal Server Error"))
    with pytest.raises(NetworkFailure, match="500 Internal Server Error: Request failed"):
        transport.request("/board/get-boards/1")


def test_connection_error_raises_network_failure() -> None:
    transport, _ = _transport(requests.ConnectionError("refused"))

    with pytest.raises(NetworkFailure) as info:
        transport.request("/user/create", "POST", {"name": "Ann"})

    assert info.value.status is None
    assert "POST /user/create failed" in str(info.value)
    assert isinstance(info.value.__cause__, requests.ConnectionError)


def test_bad_json_raises_network_failure() -> None:
    transport, _ = _transport(FakeResponse(200, None, text="{not json"))
    with pytest.raises(NetworkFailure, match="Invalid JSON"):
        transport.request("/board/get-boards/1")


def test_from_settings_and_close(settings) -> None:
    session = FakeSession()
    transport = HttpTransport.from_settings(settings, session=session)

    assert transport.base_url == "http://api.test"
    assert transport.timeout == 2.0

    transport.close()
    assert session.closed


# ---- HttpBoardApi over a recording transport ----


class RecordingTransport:
    def __init__(self, reply=None) -> None:
        self.reply = reply
        self.sent: list[tuple[str, str, dict | None]] = []

    def request(self, path, method="GET", body=None):
        self.sent.append((path, method, body))
        return self.reply


@pytest.mark.asyncio
async def test_board_api_paths_and_bodies() -> None:
    transport = RecordingTransport()
    api = HttpBoardApi(transport)

    await api.create_board("Roadmap", 7)
    await api.update_board(1, {"title": "B"})
    await api.delete_board(1)
    await api.create_list("Todo", 1)
    await api.update_list(10, {"title": "L"})
    await api.delete_list(10)
    await api.create_task("Write", "", Priority.HIGH, 10)
    await api.update_task(100, {"priority": Priority.MEDIUM, "description": None})
    await api.delete_task(100)

    assert transport.sent == [
        ("/board/create", "POST", {"title": "Roadmap", "userId": 7}),
        ("/board/update/1", "PUT", {"title": "B"}),
        ("/board/delete/1", "DELETE", None),
        ("/list/create", "POST", {"title": "Todo", "boardId": 1}),
        ("/list/update/10", "PUT", {"title": "L"}),
        ("/list/delete/10", "DELETE", None),
        ("/task/create", "POST", {"title": "Write", "description": "", "priority": "high", "listId": 10}),
        ("/task/update/100", "PUT", {"priority": "medium", "description": ""}),
        ("/task/delete/100", "DELETE", None),
    ]
    assert type(transport.sent[6][2]["priority"]) is str


@pytest.mark.asyncio
async def test_board_api_get_boards_shapes() -> None:
    api = HttpBoardApi(RecordingTransport(reply=None))
    assert await api.get_boards(7) == []

    api = HttpBoardApi(RecordingTransport(reply={"boards": []}))
    with pytest.raises(InvalidPayload):
        await api.get_boards(7)


@pytest.mark.asyncio
async def test_board_api_create_user_requires_id() -> None:
    transport = RecordingTransport(reply={"id": 7, "name": "Ann"})
    assert await HttpBoardApi(transport).create_user("Ann") == {"id": 7, "name": "Ann"}
    assert transport.sent == [("/user/create", "POST", {"name": "Ann"})]

    with pytest.raises(InvalidPayload):
        await HttpBoardApi(RecordingTransport(reply=None)).create_user("Ann")
