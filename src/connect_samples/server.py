from __future__ import annotations

import uvicorn

from .app import create_app
from .settings import settings


def main() -> None:
    config = uvicorn.Config(
        create_app(),
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
