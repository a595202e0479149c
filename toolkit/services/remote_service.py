"""Outbound JSON push.

One POST, no retries. The caller may pass its own ``requests.Session``
(connection pooling, custom adapters, tests); otherwise a short-lived
session is used.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

import requests
from pydantic import BaseModel

from toolkit.errors import RemoteRequestError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def push_json_to_remote(
    url: str,
    payload: Any,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Tuple[requests.Response, int]:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    body = json.dumps(payload)

    owns_session = session is None
    client = session if session is not None else requests.Session()
    try:
        resp = client.post(url, data=body, headers={"Content-Type": "application/json"}, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Push to %s failed: %s", url, e)
        raise RemoteRequestError(f"failed to push JSON to {url}: {e}") from e
    finally:
        if owns_session:
            client.close()

    logger.debug("Pushed JSON to %s -> %s", url, resp.status_code)
    return resp, resp.status_code
