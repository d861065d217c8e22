"""Tests for SHA-256 digest helpers."""

import hashlib

import pytest

from fixture_fetch.digest import (
    HEX_LENGTH,
    digest_hex,
    file_digest_hex,
    validate_hash,
    verify,
)
from fixture_fetch.errors import ConfigurationError, ErrorCategory

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


class TestDigestHex:
    def test_known_value(self):
        assert digest_hex(b"hello") == HELLO_SHA256

    def test_deterministic(self):
        data = bytes(range(256)) * 10
        assert digest_hex(data) == digest_hex(bytes(data))

    def test_lowercase_fixed_length(self):
        for data in (b"", b"x", b"\x00" * 4096):
            value = digest_hex(data)
            assert len(value) == HEX_LENGTH == 64
            assert value == value.lower()

    def test_file_digest_matches_bytes(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"hello")
        assert file_digest_hex(path) == HELLO_SHA256


class TestVerify:
    def test_accepts_own_digest(self):
        data = b"fixture payload"
        assert verify(data, digest_hex(data)) is True

    def test_single_byte_mutation_rejected(self):
        data = bytearray(b"fixture payload")
        expected = digest_hex(bytes(data))
        for i in range(len(data)):
            mutated = bytearray(data)
            mutated[i] ^= 0x01
            assert verify(bytes(mutated), expected) is False

    def test_expected_compared_case_insensitively(self):
        assert verify(b"hello", HELLO_SHA256.upper()) is True


class TestValidateHash:
    def test_normalizes_case_and_whitespace(self):
        assert validate_hash(f"  {HELLO_SHA256.upper()} ") == HELLO_SHA256

    @pytest.mark.parametrize("value", ["", "abc", HELLO_SHA256[:-1], HELLO_SHA256 + "0"])
    def test_wrong_length_is_configuration_error(self, value):
        with pytest.raises(ConfigurationError, match="64 hex characters") as excinfo:
            validate_hash(value)
        assert excinfo.value.category == ErrorCategory.PERMANENT
        assert excinfo.value.is_retryable is False

    def test_non_hex_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="non-hexadecimal"):
            validate_hash("z" * 64)

    def test_matches_hashlib_digest_size(self):
        assert HEX_LENGTH == hashlib.sha256().digest_size * 2
