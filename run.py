"""Unified entry point for the cashbox API and its scheduler.

This script serves the FastAPI application with Uvicorn and runs the
background scheduler (scheduled reports, recurring contributions,
notification clean-up) in the same event loop.  It is intended to be
executed from the project root, e.g. in Docker where only a single
Python file is specified.

Configuration (database file, log level, mail relay) is read from
environment variables; see ``cashbox_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from cashbox_api.app.core.db import init_db
from cashbox_api.app.main import app
from cashbox_api.app.scheduler import run_scheduler


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables `API_HOST` and
    `API_PORT`. Defaults are `0.0.0.0` and `8000`.
    """
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


async def main() -> None:
    """Run the API and the scheduler concurrently."""
    init_db()
    tasks = [asyncio.create_task(run_api()), asyncio.create_task(run_scheduler())]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    for task in done:
        if exception := task.exception():
            logging.getLogger(__name__).error("Exception in service", exc_info=exception)
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
