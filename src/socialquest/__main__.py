"""Run the API server: ``python -m socialquest``.

Unhandled errors in background tasks stop the server instead of leaving it
half-alive.
"""

import asyncio
import sys
from typing import Any

import structlog
import uvicorn

from socialquest.config import get_settings

logger = structlog.get_logger()


async def serve() -> int:
    settings = get_settings()
    config = uvicorn.Config(
        "socialquest.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    server = uvicorn.Server(config)
    failed = False

    def _on_loop_error(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        nonlocal failed
        failed = True
        logger.critical(
            "background_task_failed",
            message=context.get("message"),
            exc_info=context.get("exception"),
        )
        server.should_exit = True

    asyncio.get_running_loop().set_exception_handler(_on_loop_error)
    await server.serve()
    return 1 if failed else 0


def main() -> None:
    sys.exit(asyncio.run(serve()))


if __name__ == "__main__":
    main()
