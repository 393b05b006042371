from __future__ import annotations

import struct
import zlib

import pytest


def make_png(w: int, h: int) -> bytes:
    """Solid white RGBA PNG."""

    def _chunk(tag: bytes, data: bytes) -> bytes:
        crc = struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
        return struct.pack(">I", len(data)) + tag + data + crc

    ihdr = struct.pack(">IIBBBBB", w, h, 8, 6, 0, 0, 0)
    row = b"\x00" + (b"\xFF\xFF\xFF\xFF" * w)
    idat = zlib.compress(row * h, level=6)
    return b"\x89PNG\r\n\x1a\n" + _chunk(b"IHDR", ihdr) + _chunk(b"IDAT", idat) + _chunk(b"IEND", b"")


@pytest.fixture
def png_bytes() -> bytes:
    return make_png(8, 8)
