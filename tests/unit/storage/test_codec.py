"""Unit tests for record framing and compression."""

import zlib

import pytest

from got.storage import codec
from got.storage.codec import Kind, Record
from got.storage.errors import (
    CorruptObjectError,
    InvalidLengthError,
    MalformedHeaderError,
    ObjectFormatError,
    TrailingBytesError,
    TruncatedRecordError,
    UnknownKindError,
)


class TestKind:
    """Test Kind parsing."""

    @pytest.mark.parametrize("token", ["blob", "tree", "commit", "tag"])
    def test_parse_known_kinds(self, token: str) -> None:
        assert Kind.parse(token).value == token

    def test_parse_unknown_kind(self) -> None:
        with pytest.raises(UnknownKindError, match="blobby"):
            Kind.parse("blobby")

    def test_str(self) -> None:
        assert str(Kind.COMMIT) == "commit"


class TestEncode:
    """Test canonical encoding."""

    def test_encode_blob(self) -> None:
        assert codec.encode(Kind.BLOB, b"hello\n") == b"blob 6\x00hello\n"

    def test_encode_empty_payload(self) -> None:
        assert codec.encode(Kind.TREE, b"") == b"tree 0\x00"

    def test_encode_accepts_kind_string(self) -> None:
        assert codec.encode("commit", b"x") == b"commit 1\x00x"

    def test_encode_payload_with_nul_bytes(self) -> None:
        payload = b"\x00\x01\x00"
        assert codec.encode(Kind.BLOB, payload) == b"blob 3\x00\x00\x01\x00"


class TestDecode:
    """Test canonical decoding."""

    def test_decode_blob(self) -> None:
        record = codec.decode(b"blob 6\x00hello\n")
        assert record == Record(Kind.BLOB, b"hello\n")
        assert record.size == 6

    @pytest.mark.parametrize("kind", list(Kind))
    def test_roundtrip_every_kind(self, kind: Kind) -> None:
        payload = b"some payload \x00 with a nul"
        assert codec.decode(codec.encode(kind, payload)) == Record(kind, payload)

    def test_decode_empty_payload(self) -> None:
        assert codec.decode(b"tag 0\x00") == Record(Kind.TAG, b"")

    def test_missing_space_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError, match="blob6"):
            codec.decode(b"blob6\x00abcdef")

    def test_missing_nul_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError, match="NUL"):
            codec.decode(b"blob 6 hello\n")

    def test_three_fields_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError):
            codec.decode(b"blob 6 7\x00hello\n")

    def test_empty_kind_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError):
            codec.decode(b" 6\x00hello\n")

    def test_non_ascii_header_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError, match="ASCII"):
            codec.decode("blöb 6".encode("utf-8") + b"\x00hello\n")

    def test_unknown_kind(self) -> None:
        with pytest.raises(UnknownKindError, match="note"):
            codec.decode(b"note 2\x00hi")

    @pytest.mark.parametrize("length", [b"six", b"-1", b"", b"0x6", b"6.0", b"+6"])
    def test_invalid_length(self, length: bytes) -> None:
        with pytest.raises(InvalidLengthError):
            codec.decode(b"blob " + length + b"\x00hello\n")

    def test_truncated_payload(self) -> None:
        with pytest.raises(TruncatedRecordError, match="declares 10 bytes"):
            codec.decode(b"blob 10\x00hello\n")

    def test_trailing_bytes(self) -> None:
        with pytest.raises(TrailingBytesError, match="1 trailing byte"):
            codec.decode(b"blob 5\x00hello\n")

    def test_errors_share_format_base(self) -> None:
        with pytest.raises(ObjectFormatError):
            codec.decode(b"garbage")


class TestCompression:
    """Test the zlib layer."""

    def test_compress_is_zlib(self) -> None:
        data = b"blob 6\x00hello\n"
        assert zlib.decompress(codec.compress(data)) == data

    def test_decompress_roundtrip(self) -> None:
        data = b"tree 0\x00"
        assert codec.decompress(codec.compress(data)) == data

    def test_decompress_garbage(self) -> None:
        with pytest.raises(CorruptObjectError, match="decompress"):
            codec.decompress(b"definitely not zlib")

    def test_decompress_truncated_stream(self) -> None:
        compressed = codec.compress(b"x" * 1000)
        with pytest.raises(CorruptObjectError):
            codec.decompress(compressed[: len(compressed) // 2])

    def test_decompress_extra_bytes_after_stream(self) -> None:
        compressed = codec.compress(b"blob 0\x00") + b"junk"
        with pytest.raises(CorruptObjectError, match="after the end"):
            codec.decompress(compressed)
