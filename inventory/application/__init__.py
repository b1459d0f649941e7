"""
Application Layer Package

Use cases exposing the inventory operations to the API layer, and the DTOs
they exchange.
"""

# Re-export submodules
from inventory.application import dtos, use_cases

__all__ = ["dtos", "use_cases"]
