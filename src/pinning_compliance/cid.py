"""Inline CID generation.

An inline CID embeds its content in an identity multihash, so a pinning
service can satisfy the pin without fetching anything from the network.
Every call produces a new CID, keeping checks independent of each other.
"""

import base64
import uuid

CID_VERSION = 1
RAW_CODEC = 0x55
IDENTITY_MULTIHASH = 0x00


def _varint(value: int) -> bytes:
    """Unsigned LEB128 encoding used by multiformats."""
    if value < 0:
        raise ValueError("varint value must be non-negative")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def inline_cid(data: bytes | None = None) -> str:
    """
    Build a CIDv1 (raw codec, identity multihash) for ``data``.

    Args:
        data: Content to inline; a unique payload is generated when omitted

    Returns:
        The CID in base32 multibase form (``b...``)
    """
    if data is None:
        data = f"pinning-compliance {uuid.uuid4()}".encode()
    raw = (
        _varint(CID_VERSION)
        + _varint(RAW_CODEC)
        + _varint(IDENTITY_MULTIHASH)
        + _varint(len(data))
        + data
    )
    encoded = base64.b32encode(raw).decode("ascii").lower().rstrip("=")
    return f"b{encoded}"
