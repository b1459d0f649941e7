"""
Database package - Infrastructure Layer

MongoDB connection handling plus the builders that turn attribute
submissions and device queries into update documents and aggregation
pipelines.
"""

from inventory.infrastructure.database.attribute_update import (
    attribute_field,
    build_attribute_upsert,
)
from inventory.infrastructure.database.mongo_database import MongoDatabase
from inventory.infrastructure.database.query_compiler import (
    build_attribute_names_pipeline,
    build_list_pipeline,
    build_search_pipeline,
)

__all__ = [
    "MongoDatabase",
    "attribute_field",
    "build_attribute_upsert",
    "build_attribute_names_pipeline",
    "build_list_pipeline",
    "build_search_pipeline",
]
