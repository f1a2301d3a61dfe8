"""Unit tests for content digests."""

import pytest

from got.storage import codec
from got.storage.codec import Kind
from got.storage.digest import digest_of, from_raw, to_raw, validate_digest
from got.storage.errors import InvalidDigestError

HELLO_DIGEST = "ce013625030ba8dba906f756967f9e9ca394464a"
EMPTY_BLOB_DIGEST = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
EMPTY_TREE_DIGEST = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


class TestDigestOf:
    """Test digest computation."""

    def test_hello_blob(self) -> None:
        assert digest_of(b"blob 6\x00hello\n") == HELLO_DIGEST

    def test_empty_blob(self) -> None:
        assert digest_of(codec.encode(Kind.BLOB, b"")) == EMPTY_BLOB_DIGEST

    def test_empty_tree(self) -> None:
        assert digest_of(codec.encode(Kind.TREE, b"")) == EMPTY_TREE_DIGEST

    def test_deterministic(self) -> None:
        data = codec.encode(Kind.BLOB, b"Deterministic hash test")
        assert digest_of(data) == digest_of(data)

    def test_covers_header(self) -> None:
        """Same payload under a different kind hashes differently."""
        assert digest_of(codec.encode(Kind.BLOB, b"x")) != digest_of(
            codec.encode(Kind.TAG, b"x")
        )

    def test_covers_whole_payload(self) -> None:
        large = b"A" * 100_000
        assert digest_of(codec.encode(Kind.BLOB, large)) != digest_of(
            codec.encode(Kind.BLOB, large[:-1] + b"B")
        )

    def test_format(self) -> None:
        digest = digest_of(b"anything")
        assert len(digest) == 40
        assert all(c in "0123456789abcdef" for c in digest)


class TestValidateDigest:
    """Test digest validation."""

    def test_valid(self) -> None:
        assert validate_digest(HELLO_DIGEST) == HELLO_DIGEST

    def test_uppercase_normalised(self) -> None:
        assert validate_digest(HELLO_DIGEST.upper()) == HELLO_DIGEST

    def test_wrong_length(self) -> None:
        with pytest.raises(InvalidDigestError, match="must be 40 characters"):
            validate_digest("abc")

    def test_not_hex(self) -> None:
        with pytest.raises(InvalidDigestError, match="hexadecimal"):
            validate_digest("g" * 40)

    def test_not_string(self) -> None:
        with pytest.raises(InvalidDigestError, match="must be string"):
            validate_digest(123)  # type: ignore

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_digest("")


class TestRawForm:
    """Test conversion between hex and raw digests."""

    def test_to_raw(self) -> None:
        raw = to_raw(HELLO_DIGEST)
        assert len(raw) == 20
        assert raw[:2] == b"\xce\x01"

    def test_from_raw(self) -> None:
        assert from_raw(bytes.fromhex(HELLO_DIGEST)) == HELLO_DIGEST

    def test_from_raw_wrong_length(self) -> None:
        with pytest.raises(InvalidDigestError, match="20 bytes"):
            from_raw(b"\x00" * 19)
