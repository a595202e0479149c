"""IO utilities for upload targets and streamed copies.

Provides:
- ``ensure_dir(path)``: create directories if missing (no error if exists).
- ``contained_path(root, name)``: join ``name`` under ``root`` and refuse
  anything that resolves outside of it.
- ``chain_stream(prefix, stream)``: yield an already-read prefix followed by
  the rest of a binary stream.
- ``copy_chunks(chunks, path)``: write an iterable of byte chunks to a file
  and return the number of bytes written.
- ``remove_quietly(path)``: best-effort unlink used for rollbacks.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Iterable, Iterator, Optional

from toolkit.errors import UnsafeFilename

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def contained_path(root: str, name: str) -> str:
    """Return the absolute target for ``name`` inside ``root``.

    Symlinks and ``..`` segments are resolved on both sides first; the
    result must be strictly below ``root``.
    """
    base = os.path.realpath(root)
    target = os.path.realpath(os.path.join(base, name))
    if target == base or os.path.commonpath([base, target]) != base:
        raise UnsafeFilename(name)
    return target


def chain_stream(prefix: bytes, stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    if prefix:
        yield prefix
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def copy_chunks(chunks: Iterable[bytes], path: str) -> int:
    written = 0
    with open(path, "wb") as f:
        for chunk in chunks:
            f.write(chunk)
            written += len(chunk)
    return written


def remove_quietly(path: Optional[str]) -> None:
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("could not remove %s during rollback: %s", path, e)
