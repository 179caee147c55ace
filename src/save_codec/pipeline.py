"""Decode and encode pipeline for save files.

Decode undoes the layers it finds: password envelope first, then gzip when
the decrypted bytes carry the gzip magic. Encode cannot detect anything from
plain JSON, so the caller must say whether to gzip through the Layering
returned by decode. Gzipping a save that the game does not expect gzipped
(or the reverse) makes the game discard it.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from . import compression
from .crypto import EnvelopeCipher
from .errors import NotEditableError, ParseError
from .json_parse import parse_json, serialize_document

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layering:
    """Which optional transforms a save file went through."""

    was_compressed: bool = False
    was_encrypted: bool = False

    def with_compression(self, compressed: bool) -> "Layering":
        """Return a copy with a deliberately chosen compression flag."""
        return replace(self, was_compressed=compressed)


@dataclass(frozen=True)
class DecodeResult:
    """Plaintext bytes and the layering discovered while decoding them."""

    plaintext: bytes
    layering: Layering


@dataclass(frozen=True)
class EditableSave(DecodeResult):
    """Decoded save whose plaintext is a JSON document."""

    document: Any = None


def decode(raw: bytes, password: Optional[str] = None) -> DecodeResult:
    """Decode raw save bytes.

    Args:
        raw: The file as loaded from storage
        password: Envelope password, empty or None for unencrypted saves

    Returns:
        DecodeResult with the plaintext and the discovered layering

    Raises:
        DecryptionError: Wrong password or corrupt envelope
        CompressionError: Gzip magic present but the stream is invalid
    """
    data = EnvelopeCipher().decrypt(raw, password)

    was_compressed = compression.is_gzip(data)
    if was_compressed:
        data = compression.decompress(data)

    layering = Layering(was_compressed=was_compressed, was_encrypted=bool(password))
    log.info(
        f"Decoded {len(raw)} bytes into {len(data)} bytes "
        f"(encrypted={layering.was_encrypted}, compressed={layering.was_compressed})"
    )
    return DecodeResult(plaintext=data, layering=layering)


def decode_for_editor(raw: bytes, password: Optional[str] = None) -> EditableSave:
    """Decode raw save bytes and parse them for the structured editor.

    Raises:
        NotEditableError: The plaintext decoded fine but is not JSON
    """
    result = decode(raw, password)

    try:
        document = parse_json(result.plaintext)
    except ParseError as e:
        log.warning(f"Decoded save is not JSON formatted: {e}")
        raise NotEditableError(
            "The save file isn't JSON formatted. Download the file and edit it manually.",
            plaintext=result.plaintext,
            parse_error=e,
        ) from e

    return EditableSave(plaintext=result.plaintext, layering=result.layering, document=document)


def encode(plaintext: bytes, password: Optional[str], layering: Layering,
           compress_level: int = 9) -> bytes:
    """Encode plaintext back into save file bytes.

    Compression follows ``layering.was_compressed`` exactly. Encryption
    follows the password: a layering that claims otherwise is logged and
    the password wins.
    """
    if layering.was_encrypted != bool(password):
        log.warning(
            f"Layering says encrypted={layering.was_encrypted} but a password was "
            f"{'given' if password else 'not given'}; following the password"
        )

    data = plaintext
    if layering.was_compressed:
        data = compression.compress(data, level=compress_level)

    data = EnvelopeCipher().encrypt(data, password)

    log.info(
        f"Encoded {len(plaintext)} bytes into {len(data)} bytes "
        f"(encrypted={bool(password)}, compressed={layering.was_compressed})"
    )
    return data


def encode_document(document: Any, password: Optional[str], layering: Layering,
                    compress_level: int = 9) -> bytes:
    """Serialize a JSON document and encode it."""
    return encode(serialize_document(document), password, layering, compress_level)
