"""
Codec factory for creating document codec instances.
"""
from typing import Dict, List, Type, Union

from nano_vectordb.core.errors import ValidationError
from nano_vectordb.serialization.interfaces import CodecType, DocumentCodecInterface
from nano_vectordb.serialization.json_codec import JsonDocumentCodec
from nano_vectordb.serialization.binary_codec import BinaryDocumentCodec

CodecSpec = Union[CodecType, str, DocumentCodecInterface]

_CODECS: Dict[CodecType, Type[DocumentCodecInterface]] = {
    CodecType.JSON: JsonDocumentCodec,
    CodecType.BINARY: BinaryDocumentCodec,
}


def create_codec(codec: CodecSpec = CodecType.JSON) -> DocumentCodecInterface:
    """
    Create a document codec.

    Args:
        codec: CodecType, codec name ('json', 'binary') or a ready codec instance.

    Returns:
        Document codec instance

    Raises:
        ValidationError: If the codec is not supported
    """
    if isinstance(codec, DocumentCodecInterface):
        return codec
    try:
        codec_type = CodecType.parse(codec)
    except ValueError:
        raise ValidationError(
            f"Unsupported codec '{codec}'. Available codecs: {list_available_codecs()}"
        )
    return _CODECS[codec_type]()


def list_available_codecs() -> List[str]:
    """List all available codec names."""
    return [codec_type.value for codec_type in _CODECS]
