"""
Infrastructure layer: asyncpg/in-memory persistence adapters, health indicators and logging helpers.

Adapters implement the Protocols in `application.ports`; they never read
service config (`config.*`) and receive DSNs and pool sizes from the wiring layer.
"""

__all__ = [
    "health",
    "persistence",
    "utils",
]
