"""
Domain Layer Package

Devices, attributes, queries and the repository port, free of any store or
framework dependency.
"""

# Re-export submodules
from inventory.domain import entities, repositories

__all__ = ["entities", "repositories"]
