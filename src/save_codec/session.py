"""Single decode, edit, encode cycle for one save file."""

import logging
from typing import Any, Optional, Union

from .errors import SaveCodecError
from .json_parse import parse_json, serialize_document
from .pipeline import EditableSave, Layering, decode_for_editor, encode

log = logging.getLogger(__name__)


class EditSession:
    """Holds one decoded save while it is being edited.

    The buffer starts as the decoded plaintext, so saving an unedited session
    writes back the same bytes it read. The layering found at open time is
    reused on save unless compression is explicitly overridden.

    Not thread-safe: run one operation at a time per session.
    """

    def __init__(self, save: EditableSave, password: Optional[str] = None, compress_level: int = 9):
        self._plaintext = save.plaintext
        self._document = save.document
        self._detected = save.layering
        self._layering = save.layering
        self._password = password
        self._compress_level = compress_level
        self._closed = False

    @classmethod
    def open(cls, raw: bytes, password: Optional[str] = None, compress_level: int = 9) -> "EditSession":
        """Decode raw save bytes into a new session.

        Raises:
            DecryptionError, CompressionError: Decoding failed
            NotEditableError: The save is not JSON
        """
        result = decode_for_editor(raw, password)
        session = cls(result, password, compress_level)
        if result.layering.was_compressed:
            log.warning(
                "Save file was also gunzipped; it will be gzipped again on save. "
                "Keep compression enabled or the game may not recognize the file."
            )
        return session

    def _check_open(self) -> None:
        if self._closed:
            raise SaveCodecError("Edit session is closed")

    @property
    def plaintext(self) -> bytes:
        self._check_open()
        return self._plaintext

    @property
    def document(self) -> Any:
        self._check_open()
        return self._document

    @property
    def layering(self) -> Layering:
        return self._layering

    @property
    def detected_layering(self) -> Layering:
        """Layering observed when the save was decoded."""
        return self._detected

    def update_document(self, document: Any) -> None:
        """Replace the buffer with a serialized document."""
        self._check_open()
        self._plaintext = serialize_document(document)
        self._document = document

    def update_text(self, text: Union[str, bytes]) -> None:
        """Replace the buffer with raw editor text.

        Raises:
            ParseError: If the text is not JSON
        """
        self._check_open()
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        self._document = parse_json(data)
        self._plaintext = data

    def set_compression(self, compressed: bool) -> None:
        """Choose whether the saved file is gzipped."""
        self._check_open()
        if compressed != self._detected.was_compressed:
            log.warning(
                f"Overriding detected compression ({self._detected.was_compressed}) with {compressed}; "
                "the game may not recognize the file if this is wrong"
            )
        self._layering = self._layering.with_compression(compressed)

    def save(self) -> bytes:
        """Encode the current buffer with the session password and layering."""
        self._check_open()
        return encode(self._plaintext, self._password, self._layering, self._compress_level)

    def close(self) -> None:
        """Discard the buffers."""
        self._plaintext = b""
        self._document = None
        self._password = None
        self._closed = True
