"""Fleet inventory: device attribute storage and query engine."""

__version__ = "1.0.0"
