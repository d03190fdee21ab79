"""Run the API server: ``python -m storefront_sync``."""

from __future__ import annotations

import uvicorn

from storefront_sync.app import create_app
from storefront_sync.settings import SyncSettings


def main() -> None:
    settings = SyncSettings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
