"""Test suite for the save decode/encode pipeline."""

import logging
import os
import sys

import pytest

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from save_codec.compression import GZIP_MAGIC, compress, is_gzip
from save_codec.crypto import decrypt_save, encrypt_save
from save_codec.errors import CompressionError, DecryptionError, NotEditableError
from save_codec.json_parse import parse_json, serialize_document
from save_codec.pipeline import (
    Layering,
    decode,
    decode_for_editor,
    encode,
    encode_document,
)

SAVE_JSON = b'{"money": 1500, "day": 12, "store": {"name": "Corner Shop", "open": true}}'


class TestLayering:
    """Test the layering record."""

    def test_defaults(self):
        layering = Layering()
        assert not layering.was_compressed
        assert not layering.was_encrypted

    def test_with_compression_returns_copy(self):
        layering = Layering(was_compressed=False, was_encrypted=True)
        forced = layering.with_compression(True)
        assert forced == Layering(was_compressed=True, was_encrypted=True)
        assert not layering.was_compressed

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Layering().was_compressed = True


class TestDecode:
    """Test layering detection during decode."""

    def test_plain_json(self):
        result = decode(SAVE_JSON, None)
        assert result.plaintext == SAVE_JSON
        assert result.layering == Layering(was_compressed=False, was_encrypted=False)

    def test_gzip_only(self):
        result = decode(compress(SAVE_JSON), "")
        assert result.plaintext == SAVE_JSON
        assert result.layering == Layering(was_compressed=True, was_encrypted=False)

    def test_encrypted_only(self):
        result = decode(encrypt_save(SAVE_JSON, "secret"), "secret")
        assert result.plaintext == SAVE_JSON
        assert result.layering == Layering(was_compressed=False, was_encrypted=True)

    def test_encrypted_and_gzipped(self):
        raw = encrypt_save(compress(SAVE_JSON), "secret")
        result = decode(raw, "secret")
        assert result.plaintext == SAVE_JSON
        assert result.layering == Layering(was_compressed=True, was_encrypted=True)

    def test_wrong_password(self):
        raw = encrypt_save(SAVE_JSON, "secret")
        try:
            result = decode(raw, "not-the-password")
        except (DecryptionError, CompressionError):
            return
        assert result.plaintext != SAVE_JSON

    def test_decryption_failure_is_terminal(self):
        with pytest.raises(DecryptionError):
            decode(b"too short", "secret")

    def test_broken_gzip_inside_envelope(self):
        raw = encrypt_save(GZIP_MAGIC + b"not really gzip", "secret")
        with pytest.raises(CompressionError):
            decode(raw, "secret")

    def test_does_not_mutate_input(self):
        raw = bytearray(encrypt_save(SAVE_JSON, "secret"))
        snapshot = bytes(raw)
        decode(bytes(raw), "secret")
        assert bytes(raw) == snapshot


class TestDecodeForEditor:
    """Test the editor gate."""

    def test_json_document(self):
        save = decode_for_editor(compress(SAVE_JSON), None)
        assert save.document["store"]["name"] == "Corner Shop"
        assert save.layering.was_compressed

    def test_trailing_commas_repaired(self):
        save = decode_for_editor(b'{"hp": 100,}', None)
        assert save.document == {"hp": 100}
        assert save.plaintext == b'{"hp": 100,}'

    def test_not_json(self):
        """Binary saves decode but cannot be edited."""
        raw = encrypt_save(b"\x00\x01binary save", "secret")
        with pytest.raises(NotEditableError) as exc_info:
            decode_for_editor(raw, "secret")
        assert exc_info.value.plaintext == b"\x00\x01binary save"
        assert exc_info.value.parse_error is not None

    @pytest.mark.parametrize("plaintext", [
        b'{"hp": NaN}',
        b"[" * 100000 + b"]" * 100000,
    ])
    def test_json_the_game_cannot_read(self, plaintext):
        """Non-standard or unparseable JSON is refused, not raised raw."""
        with pytest.raises(NotEditableError):
            decode_for_editor(plaintext, None)


class TestEncode:
    """Test encode with caller-declared layering."""

    def test_no_layers(self):
        assert encode(SAVE_JSON, None, Layering()) == SAVE_JSON

    def test_gzip_only(self):
        encoded = encode(SAVE_JSON, "", Layering(was_compressed=True))
        assert is_gzip(encoded)

    def test_compress_before_encrypt(self):
        encoded = encode(SAVE_JSON, "secret", Layering(was_compressed=True, was_encrypted=True))
        assert is_gzip(decrypt_save(encoded, "secret"))

    def test_compression_is_not_inferred(self):
        """Without the flag nothing is compressed, even for gzip-decoded saves."""
        encoded = encode(SAVE_JSON, "secret", Layering(was_compressed=False, was_encrypted=True))
        assert decrypt_save(encoded, "secret") == SAVE_JSON

    def test_password_wins_over_layering(self, caplog):
        with caplog.at_level(logging.WARNING, logger="save_codec.pipeline"):
            encoded = encode(SAVE_JSON, None, Layering(was_encrypted=True))
        assert encoded == SAVE_JSON
        assert "following the password" in caplog.text


class TestRoundTrip:
    """Test decode(encode(...)) for all layerings."""

    @pytest.mark.parametrize("password", ["", "secret"])
    @pytest.mark.parametrize("compressed", [False, True])
    def test_document_round_trip(self, password, compressed):
        document = {"hp": 100, "inventory": [{"id": 3, "count": 2}], "name": "Zoë", "flag": None}
        layering = Layering(was_compressed=compressed, was_encrypted=bool(password))
        raw = encode_document(document, password, layering)
        save = decode_for_editor(raw, password)
        assert save.document == document
        assert save.layering == layering

    def test_hp_scenario(self):
        """Encrypted, uncompressed save with a trailing comma."""
        plaintext = b'{"hp": 100,}'
        layering = Layering(was_compressed=False, was_encrypted=True)
        raw = encode(plaintext, "secret", layering)
        assert len(raw) == 16 + ((len(plaintext) + 1 + 15) // 16) * 16

        save = decode_for_editor(raw, "secret")
        assert save.document == {"hp": 100}
        assert not save.layering.was_compressed
        assert serialize_document(save.document) == b'{"hp":100}'

    def test_re_encode_with_decoded_layering(self):
        original = encrypt_save(compress(SAVE_JSON), "secret")
        result = decode(original, "secret")
        re_encoded = encode(result.plaintext, "secret", result.layering)
        again = decode(re_encoded, "secret")
        assert again.plaintext == SAVE_JSON
        assert again.layering == result.layering
        assert parse_json(again.plaintext)["day"] == 12


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
