"""
In-process messaging: the event dispatcher, the buses, the messages
they carry and the subscribers and handlers wired up at startup.
"""
