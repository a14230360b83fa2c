"""
Main entrypoint for the Team Cashbox API.

This module assembles the FastAPI application: it sets up logging,
wires the event subscribers and the command, query and message handlers
onto the process-wide buses, and includes the versioned routers.  The
app is instantiated at import time as ``app`` so it can be served
directly, e.g.::

    uvicorn cashbox_api.app.main:app --reload
"""

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .application.commands import register_command_handlers
from .application.queries import register_query_handlers
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .messaging.bus import command_bus, event_dispatcher, message_bus, query_bus
from .messaging.handlers import register_message_handlers
from .messaging.subscribers import register_subscribers


def configure_messaging() -> None:
    """(Re)wire subscribers and handlers onto the global dispatcher and buses.

    Existing registrations are dropped first, so calling ``create_app``
    more than once does not register anything twice.
    """
    event_dispatcher.reset()
    for bus in (command_bus, query_bus, message_bus):
        bus.clear()
    register_subscribers(event_dispatcher, message_bus)
    register_message_handlers(message_bus)
    register_command_handlers(command_bus)
    register_query_handlers(query_bus)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file)
    configure_messaging()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()

    return app


app = create_app()
