"""Error types raised by the save codec."""

from typing import Optional


class SaveCodecError(Exception):
    """Base class for every codec failure."""

    classification = "Save file error"


class DecryptionError(SaveCodecError):
    """Wrong password, corrupt ciphertext or malformed envelope."""

    classification = "Failed decrypting the save file"


class CompressionError(SaveCodecError):
    """Malformed or truncated gzip stream."""

    classification = "Failed decompressing the save file"


class ParseError(SaveCodecError):
    """JSON that cannot be parsed, even after trailing comma repair."""

    classification = "Save file isn't JSON formatted"

    def __init__(self, message: str, offset: Optional[int] = None,
                 lineno: Optional[int] = None, colno: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.lineno = lineno
        self.colno = colno

    def __str__(self) -> str:
        if self.lineno is not None and self.colno is not None:
            return f"{self.message}: line {self.lineno} column {self.colno} (char {self.offset})"
        if self.offset is not None:
            return f"{self.message} (offset {self.offset})"
        return self.message


class NotEditableError(SaveCodecError):
    """Decoded bytes are valid but cannot be opened as a JSON tree.

    The plaintext is kept on the exception so callers can still offer it as a
    plain download.
    """

    classification = "Can't open editor"

    def __init__(self, message: str, plaintext: bytes = b"",
                 parse_error: Optional[ParseError] = None):
        super().__init__(message)
        self.plaintext = plaintext
        self.parse_error = parse_error
