"""Pre-flight checks for decrypt, encrypt and editor requests."""

import os
from typing import Optional

from save_codec import is_gzip, is_well_formed

from .logger import log

DEFAULT_BASE_NAME = "SaveFile"


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


def validate_file_data(data: Optional[bytes]) -> None:
    """Validate that a file was read."""
    if not data:
        raise ValidationError("No file chosen")


def validate_decrypt_request(data: Optional[bytes], password: Optional[str]) -> None:
    """Validate a plain decrypt request.

    Without a password the only layer that can be undone is gzip.
    """
    validate_file_data(data)

    if not password and not is_gzip(data):
        raise ValidationError("No password provided")


def validate_editor_request(data: Optional[bytes], password: Optional[str]) -> None:
    """Validate a request to open a save in the editor."""
    validate_file_data(data)

    if not password and not is_gzip(data) and not is_well_formed(data):
        raise ValidationError("No password provided")


def validate_encrypt_request(data: Optional[bytes], password: Optional[str], should_gzip: bool) -> None:
    """Validate an encrypt request."""
    validate_file_data(data)

    if not password and not should_gzip:
        raise ValidationError("No password provided")

    log.debug(f"Validated encrypt request: {len(data)} bytes, gzip={should_gzip}")


def output_file_name(source_name: Optional[str], encrypting: bool) -> str:
    """Build the default output file name for a processed save."""
    base = os.path.basename(source_name) if source_name else ""
    base = base or DEFAULT_BASE_NAME
    suffix = "encrypted" if encrypting else "decrypted"
    return f"{base}.{suffix}.txt"
