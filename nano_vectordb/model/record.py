"""
Record and query result types stored in and returned by a vector store.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

import numpy as np

# Opaque, JSON-compatible value attached to a store (null/bool/number/string/array/object)
JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

VectorLike = Union[np.ndarray, Sequence[float]]


def as_vector(vector: VectorLike) -> np.ndarray:
    """Convert a sequence of numbers to a float32 array without copying when possible."""
    return np.asarray(vector, dtype=np.float32)


@dataclass(frozen=True, eq=False)
class Record:
    """
    A single (id, embedding) entry.

    Records are immutable: the vector is stored as a read-only float32 copy and a
    later upsert with the same id replaces the record wholesale.
    """

    id: str
    vector: np.ndarray

    def __post_init__(self):
        vector = np.array(self.vector, dtype=np.float32, copy=True)
        vector.setflags(write=False)
        object.__setattr__(self, "vector", vector)

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0]) if self.vector.ndim == 1 else -1

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "vector": self.vector.tolist()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Record":
        """
        Create a Record from a dictionary with 'id' and 'vector' keys.

        A missing id is treated as empty, which makes the store derive one from
        the vector content on upsert.
        """
        return cls(id=data.get("id") or "", vector=data["vector"])

    def __repr__(self) -> str:
        return f"Record(id={self.id!r}, dim={self.dimension})"


@dataclass(frozen=True)
class QueryResult:
    """A record returned by a similarity query with its score (higher is better)."""

    record: Record
    score: float

    @property
    def id(self) -> str:
        return self.record.id
