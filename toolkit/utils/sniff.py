"""Content-type sniffing from leading bytes.

``detect_content_type(data)`` hands no more than the first ``SNIFF_LEN``
bytes to libmagic (via python-magic) and returns the MIME type it reports,
ignoring whatever the client declared. Content libmagic cannot classify is
``application/octet-stream``.
"""

from __future__ import annotations

import logging

import magic

logger = logging.getLogger(__name__)

SNIFF_LEN = 512

OCTET_STREAM = "application/octet-stream"


def detect_content_type(data: bytes) -> str:
    head = bytes(data[:SNIFF_LEN])
    try:
        mime_type = magic.from_buffer(head, mime=True)
    except magic.MagicException as e:
        logger.warning("libmagic could not classify %d bytes: %s", len(head), e)
        return OCTET_STREAM
    return mime_type or OCTET_STREAM
