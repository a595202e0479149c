"""Random token helpers.

Provides:
- ``random_string(n)``: an ``n``-character token drawn uniformly from
  ``RANDOM_STRING_SOURCE`` using the OS CSPRNG (``secrets``). Used to
  disambiguate uploaded file names.
"""

from __future__ import annotations

import secrets

RANDOM_STRING_SOURCE = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+"


def random_string(n: int) -> str:
    """Return a random token of exactly ``n`` characters (empty for n <= 0).

    Each character is chosen independently with ``secrets.choice``; if the
    system entropy source fails the error propagates.
    """
    if n <= 0:
        return ""
    return "".join(secrets.choice(RANDOM_STRING_SOURCE) for _ in range(n))
