"""
Document codecs for persisting vector stores.
"""

from .interfaces import CodecType, DocumentCodecInterface, StoreDocument
from .json_codec import JsonDocumentCodec
from .binary_codec import BinaryDocumentCodec
from .factory import create_codec, list_available_codecs

__all__ = [
    "CodecType",
    "DocumentCodecInterface",
    "StoreDocument",
    "JsonDocumentCodec",
    "BinaryDocumentCodec",
    "create_codec",
    "list_available_codecs",
]
