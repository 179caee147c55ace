"""Tests for the edit session."""

import logging
import os
import sys

import pytest

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from save_codec.compression import compress, is_gzip
from save_codec.crypto import decrypt_save, encrypt_save
from save_codec.errors import NotEditableError, ParseError, SaveCodecError
from save_codec.pipeline import Layering, decode
from save_codec.session import EditSession


@pytest.fixture
def gzipped_save():
    """Encrypted and gzipped save with a trailing comma."""
    return encrypt_save(compress(b'{"money": 10, "day": 1,}'), "secret")


class TestEditSession:
    """Test a decode, edit, encode cycle."""

    def test_open(self, gzipped_save):
        session = EditSession.open(gzipped_save, "secret")
        assert session.document == {"money": 10, "day": 1}
        assert session.layering == Layering(was_compressed=True, was_encrypted=True)
        assert session.detected_layering == session.layering

    def test_open_warns_about_gzip(self, gzipped_save, caplog):
        with caplog.at_level(logging.WARNING, logger="save_codec.session"):
            EditSession.open(gzipped_save, "secret")
        assert "gunzipped" in caplog.text

    def test_unedited_save_keeps_plaintext(self, gzipped_save):
        """Saving without edits writes back the decoded bytes unchanged."""
        session = EditSession.open(gzipped_save, "secret")
        result = decode(session.save(), "secret")
        assert result.plaintext == b'{"money": 10, "day": 1,}'
        assert result.layering == Layering(was_compressed=True, was_encrypted=True)

    def test_update_document(self, gzipped_save):
        session = EditSession.open(gzipped_save, "secret")
        document = session.document
        document["money"] = 99999
        session.update_document(document)
        assert session.plaintext == b'{"money":99999,"day":1}'

        result = decode(session.save(), "secret")
        assert result.plaintext == b'{"money":99999,"day":1}'
        assert result.layering.was_compressed

    def test_update_text(self):
        session = EditSession.open(b'{"a": 1}')
        session.update_text('{"a": 2,}')
        assert session.document == {"a": 2}
        assert session.save() == b'{"a": 2,}'

    def test_update_text_rejects_invalid_json(self):
        session = EditSession.open(b'{"a": 1}')
        with pytest.raises(ParseError):
            session.update_text("{broken")
        assert session.plaintext == b'{"a": 1}'
        assert session.document == {"a": 1}

    def test_set_compression_override(self, caplog):
        session = EditSession.open(encrypt_save(b'{"a": 1}', "pw"), "pw")
        with caplog.at_level(logging.WARNING, logger="save_codec.session"):
            session.set_compression(True)
        assert "Overriding detected compression" in caplog.text
        assert session.layering.was_compressed
        assert not session.detected_layering.was_compressed
        assert is_gzip(decrypt_save(session.save(), "pw"))

    def test_set_compression_same_as_detected_is_silent(self, gzipped_save, caplog):
        session = EditSession.open(gzipped_save, "secret")
        with caplog.at_level(logging.WARNING, logger="save_codec.session"):
            session.set_compression(True)
        assert "Overriding" not in caplog.text

    def test_not_editable(self):
        with pytest.raises(NotEditableError):
            EditSession.open(b"plain text save")

    def test_closed_session(self):
        session = EditSession.open(b'{"a": 1}')
        session.close()
        with pytest.raises(SaveCodecError):
            session.save()
        with pytest.raises(SaveCodecError):
            session.document


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
