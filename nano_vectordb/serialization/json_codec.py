"""
JSON document codec.

Produces the reference persisted format:

    {"embedding_dim": 4,
     "data": [{"id": "a"}, ...],
     "matrix": "<base64 of the little-endian float32 row-major buffer>",
     "additional_data": {...}}

The matrix is an empty string for a store without records.
"""

import base64
import binascii
import json
import logging

from nano_vectordb.core.errors import CorruptDataError
from nano_vectordb.serialization.interfaces import (
    CodecType,
    DocumentCodecInterface,
    StoreDocument,
)

REQUIRED_FIELDS = ("embedding_dim", "matrix", "data")


class JsonDocumentCodec(DocumentCodecInterface):
    """JSON codec with a base64-encoded float32 matrix."""

    def __init__(self, indent: int = None):
        self.indent = indent
        self.logger = logging.getLogger(__name__)

    @property
    def codec_type(self) -> CodecType:
        return CodecType.JSON

    @property
    def file_extension(self) -> str:
        return ".json"

    def encode(self, document: StoreDocument) -> bytes:
        payload = {
            "embedding_dim": document.embedding_dim,
            "data": [{"id": record_id} for record_id in document.ids],
            "matrix": base64.b64encode(self.matrix_to_bytes(document.matrix)).decode("ascii"),
        }
        if document.additional_data is not None:
            payload["additional_data"] = document.additional_data

        return json.dumps(payload, indent=self.indent).encode("utf-8")

    def decode(self, data: bytes) -> StoreDocument:
        try:
            payload = json.loads(data)
        except (ValueError, TypeError) as e:
            raise CorruptDataError(f"Stored document is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise CorruptDataError("Stored document must be a JSON object")

        missing = [key for key in REQUIRED_FIELDS if key not in payload]
        if missing:
            raise CorruptDataError(f"Stored document missing required fields: {missing}")

        embedding_dim = self.validate_embedding_dim(payload["embedding_dim"])
        ids = self.validate_ids(payload["data"], "data")

        encoded_matrix = payload["matrix"]
        if not isinstance(encoded_matrix, str):
            raise CorruptDataError("Document field 'matrix' must be a base64 string")
        try:
            buffer = base64.b64decode(encoded_matrix, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CorruptDataError(f"Matrix is not valid base64: {e}") from e

        matrix = self.matrix_from_bytes(buffer, embedding_dim, len(ids))
        self.logger.debug(f"Decoded JSON document with {len(ids)} rows of dim {embedding_dim}")

        return StoreDocument(
            embedding_dim=embedding_dim,
            ids=ids,
            matrix=matrix,
            additional_data=payload.get("additional_data"),
        )
