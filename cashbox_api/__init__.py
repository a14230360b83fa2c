"""Team Cashbox API: team finance administration backend."""

__all__ = []
