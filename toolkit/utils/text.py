"""Text utilities.

``slugify`` turns free text into a lowercase, hyphen-separated, URL-safe
slug made of ASCII letters and digits only.
"""

from __future__ import annotations

import re

from toolkit.errors import InvalidSlug

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    if text == "":
        raise InvalidSlug("empty string not permitted")
    slug = _NON_SLUG.sub("-", text.lower()).strip("-")
    if not slug:
        raise InvalidSlug("after removing characters, slug is zero length")
    return slug
