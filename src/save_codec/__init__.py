"""Save file codec: gzip, password envelope and lenient JSON for game saves."""

from .compression import compress, decompress, is_gzip
from .crypto import EnvelopeCipher, decrypt_save, encrypt_save
from .errors import (
    CompressionError,
    DecryptionError,
    NotEditableError,
    ParseError,
    SaveCodecError,
)
from .json_parse import get_parse_error, is_well_formed, parse_json, serialize_document
from .pipeline import DecodeResult, EditableSave, Layering, decode, decode_for_editor, encode, encode_document
from .session import EditSession

__all__ = [
    "CompressionError",
    "DecodeResult",
    "DecryptionError",
    "EditSession",
    "EditableSave",
    "EnvelopeCipher",
    "Layering",
    "NotEditableError",
    "ParseError",
    "SaveCodecError",
    "compress",
    "decode",
    "decode_for_editor",
    "decompress",
    "decrypt_save",
    "encode",
    "encode_document",
    "encrypt_save",
    "get_parse_error",
    "is_gzip",
    "is_well_formed",
    "parse_json",
    "serialize_document",
]
