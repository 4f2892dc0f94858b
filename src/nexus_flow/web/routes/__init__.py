"""REST routes, one router per domain."""

from nexus_flow.web.routes import finance, focus, inventory, tasks

__all__ = ["finance", "focus", "inventory", "tasks"]
