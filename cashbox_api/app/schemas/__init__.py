"""
Pydantic schema definitions for API payloads.

Each aggregate defines its own ``Create``/``Update``/``Read`` models.
Schemas describe the HTTP representation only; validation of business
rules stays in the domain layer.
"""
