"""
Command and query handlers for teams and penalties.

Commands and queries are dispatched on ``command_bus`` and
``query_bus`` from :mod:`cashbox_api.app.messaging.bus`; the
``register_*`` functions are called once by ``create_app``.
"""
