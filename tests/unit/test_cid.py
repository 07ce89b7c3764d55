"""Tests for inline CID generation."""

import base64

import pytest

from pinning_compliance.cid import _varint, inline_cid


def _decode(cid: str) -> bytes:
    body = cid[1:].upper()
    return base64.b32decode(body + "=" * (-len(body) % 8))


class TestVarint:
    @pytest.mark.parametrize(
        ("value", "encoded"),
        [(0, b"\x00"), (1, b"\x01"), (0x55, b"\x55"), (127, b"\x7f"), (128, b"\x80\x01"), (300, b"\xac\x02")],
    )
    def test_encoding(self, value: int, encoded: bytes) -> None:
        assert _varint(value) == encoded

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            _varint(-1)


class TestInlineCid:
    """Tests for inline_cid."""

    def test_layout(self) -> None:
        """CIDv1, raw codec, identity multihash carrying the data."""
        cid = inline_cid(b"hello")

        assert cid.startswith("bafkq")
        assert cid == cid.lower()
        assert "=" not in cid
        assert _decode(cid) == b"\x01\x55\x00\x05hello"

    def test_empty_data(self) -> None:
        assert _decode(inline_cid(b"")) == b"\x01\x55\x00\x00"

    def test_generated_cids_are_unique(self) -> None:
        assert len({inline_cid() for _ in range(20)}) == 20
