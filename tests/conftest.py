"""Pytest configuration and fixtures for toolkit tests."""

import struct
import zlib

import pytest

from toolkit import create_app
from toolkit.config import ToolsSettings
from toolkit.tools import Tools


def _png(width: int = 64, height: int = 64) -> bytes:
    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    rows = b"".join(b"\x00" + bytes((x * 3 + y) % 256 for x in range(width * 3)) for y in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(rows, 0))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def png_bytes():
    """A valid RGB PNG well over the 512-byte sniff window."""
    return _png()


@pytest.fixture
def jpeg_bytes():
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x11" * 700 + b"\xff\xd9"


@pytest.fixture
def text_bytes():
    return b"just some plain text, not an image\n" * 20


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def app(upload_dir):
    app = create_app(
        {
            "TESTING": True,
            "UPLOAD_DIR": str(upload_dir),
            "ALLOWED_TYPES": ["image/png", "image/jpeg"],
            "RANDOMIZE_UPLOADS": True,
            "MAX_JSON_BYTES": 1024,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tools():
    return Tools(ToolsSettings(allowed_types=("image/png", "image/jpeg")))
