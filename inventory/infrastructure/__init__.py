"""
Infrastructure Layer Package

MongoDB-backed implementations of the domain repository port: connection
handling, update/query compilation and execution.
"""

from inventory.infrastructure import database, repositories

__all__ = ["database", "repositories"]
