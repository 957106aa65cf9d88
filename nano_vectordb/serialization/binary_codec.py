"""
Compact binary document codec.

Layout: the 4-byte magic ``NVDB``, a 4-byte big-endian header length, a UTF-8
JSON header ``{"embedding_dim", "ids", "additional_data"}`` and finally the raw
little-endian float32 row-major matrix. Avoids the base64 overhead of the JSON
codec for large stores.
"""

import json
import struct

from nano_vectordb.core.errors import CorruptDataError
from nano_vectordb.serialization.interfaces import (
    CodecType,
    DocumentCodecInterface,
    StoreDocument,
)

MAGIC = b"NVDB"
_HEADER_LENGTH = struct.Struct(">I")


class BinaryDocumentCodec(DocumentCodecInterface):
    """Length-prefixed JSON header followed by the raw float32 buffer."""

    @property
    def codec_type(self) -> CodecType:
        return CodecType.BINARY

    @property
    def file_extension(self) -> str:
        return ".nvdb"

    def encode(self, document: StoreDocument) -> bytes:
        header = json.dumps({
            "embedding_dim": document.embedding_dim,
            "ids": list(document.ids),
            "additional_data": document.additional_data,
        }).encode("utf-8")
        return b"".join([
            MAGIC,
            _HEADER_LENGTH.pack(len(header)),
            header,
            self.matrix_to_bytes(document.matrix),
        ])

    def decode(self, data: bytes) -> StoreDocument:
        data = bytes(data)
        prefix = len(MAGIC) + _HEADER_LENGTH.size
        if len(data) < prefix or data[:len(MAGIC)] != MAGIC:
            raise CorruptDataError("Stored document is not in the binary NVDB format")

        (header_length,) = _HEADER_LENGTH.unpack_from(data, len(MAGIC))
        if prefix + header_length > len(data):
            raise CorruptDataError(
                f"Header length {header_length} exceeds document size {len(data)}"
            )

        try:
            header = json.loads(data[prefix:prefix + header_length].decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise CorruptDataError(f"Binary document header is not valid JSON: {e}") from e

        if not isinstance(header, dict):
            raise CorruptDataError("Binary document header must be a JSON object")
        missing = [key for key in ("embedding_dim", "ids") if key not in header]
        if missing:
            raise CorruptDataError(f"Stored document missing required fields: {missing}")

        embedding_dim = self.validate_embedding_dim(header["embedding_dim"])
        ids = self.validate_ids(header["ids"], "ids")
        matrix = self.matrix_from_bytes(data[prefix + header_length:], embedding_dim, len(ids))

        return StoreDocument(
            embedding_dim=embedding_dim,
            ids=ids,
            matrix=matrix,
            additional_data=header.get("additional_data"),
        )
