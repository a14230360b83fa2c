"""
Application package initializer.

The project is organised in layers: ``domain`` (aggregates, value
objects, events), ``repositories`` (SQLite persistence), ``messaging``
(event dispatcher and buses), ``application`` (commands and queries),
``services`` (use cases) and ``api`` (FastAPI routers).  ``main``
assembles them into the ASGI ``app``.
"""

from .main import app  # noqa: F401
