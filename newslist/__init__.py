"""News list service: Redis article indexes fed from a MongoDB oplog, served over HTTP."""

__version__ = "0.1.0"