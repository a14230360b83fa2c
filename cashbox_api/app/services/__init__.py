"""
Service layer.

Each service encapsulates the use cases of one area (teams, penalties,
payments, contributions, reports, notifications, dashboards) behind
async classmethods returning pydantic read models, so the API handlers
stay free of persistence and domain details.
"""
