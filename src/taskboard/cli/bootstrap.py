# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the Store, HTTP transport, board API and controller into one App value.

Nothing here is global: main() builds an App and hands it to the console loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..api.board_api import HttpBoardApi
from ..api.transport import HttpTransport
from ..config import get_settings
from ..core.ports import BoardApi
from ..core.store import Store
from ..sync.controller import BoardController

logger = logging.getLogger(__name__)


@dataclass
class App:
    # Settings live on the App for easy access in commands.
    settings: object

    store: Store
    api: BoardApi
    controller: BoardController
    transport: HttpTransport | None = None

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()


def create_app(*, settings=None, api: BoardApi | None = None) -> App:
    """
    Create the App from the provided settings.

    Keeping settings (and the API) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)

    transport: HttpTransport | None = None
    if api is None:
        transport = HttpTransport.from_settings(settings)
        api = HttpBoardApi(transport)
        logger.info("Board API at %s", transport.base_url)

    store = Store()
    return App(
        settings=settings,
        store=store,
        api=api,
        controller=BoardController(store, api),
        transport=transport,
    )
