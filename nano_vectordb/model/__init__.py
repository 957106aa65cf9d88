"""
Data model for vector records and query results.
"""

from .record import Record, QueryResult, JsonValue, VectorLike, as_vector

__all__ = ["Record", "QueryResult", "JsonValue", "VectorLike", "as_vector"]
