"""
Interfaces for document codec implementations.
"""

from .codec_interface import (
    CodecType,
    DocumentCodecInterface,
    StoreDocument,
    FLOAT_DTYPE,
)

__all__ = ["CodecType", "DocumentCodecInterface", "StoreDocument", "FLOAT_DTYPE"]
