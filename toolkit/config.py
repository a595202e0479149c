"""Configuration for environment variables and runtime knobs.

Provides a simple config object with the upload directory, size ceilings
and the MIME allow-list, plus ``ToolsSettings``: the immutable value the
toolkit services actually read. Keeps the rest of the codebase decoupled
from direct env access.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple

from dotenv import load_dotenv

# Load .env for local dev if available
load_dotenv()

DEFAULT_MAX_UPLOAD_SIZE = 1024 * 1024 * 1024
DEFAULT_MAX_JSON_SIZE = 1024 * 1024
DEFAULT_RANDOM_NAME_LENGTH = 25


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _split_types(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(t.strip() for t in raw.split(",") if t.strip())


class PartialUploadPolicy(str, Enum):
    """What happens to files already written when a later part fails."""

    BEST_EFFORT = "best_effort"
    ROLLBACK = "rollback"


class Config:
    # Base
    TOOLKIT_ENV = os.getenv("TOOLKIT_ENV", "dev")
    DATA_DIR = os.getenv("TOOLKIT_DATA_DIR", os.path.abspath(os.path.join(os.getcwd(), "data")))
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(DATA_DIR, "uploads"))

    # Upload limits and whitelist (sniffed MIME types, empty means unrestricted)
    MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "1024"))
    ALLOWED_TYPES = _split_types(os.getenv("ALLOWED_TYPES", "image/jpeg,image/png,image/gif,application/pdf"))
    RANDOMIZE_UPLOADS = _env_bool("RANDOMIZE_UPLOADS", "true")
    PARTIAL_UPLOAD_POLICY = os.getenv("PARTIAL_UPLOAD_POLICY", PartialUploadPolicy.BEST_EFFORT.value)
    UPLOAD_FIELD = os.getenv("UPLOAD_FIELD") or None

    # JSON request bodies
    MAX_JSON_BYTES = int(os.getenv("MAX_JSON_BYTES", str(DEFAULT_MAX_JSON_SIZE)))
    ALLOW_UNKNOWN_FIELDS = _env_bool("ALLOW_UNKNOWN_FIELDS")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class ToolsSettings:
    """Immutable per-instance configuration for ``Tools``.

    ``max_upload_size`` and ``max_json_size`` of 0 fall back to the
    defaults (1 GiB and 1 MiB). An empty ``allowed_types`` accepts every
    sniffed type. ``upload_field`` restricts ingestion to one form field;
    ``None`` takes every file part of the form.
    """

    allowed_types: Tuple[str, ...] = ()
    max_upload_size: int = 0
    max_json_size: int = 0
    allow_unknown_fields: bool = False
    upload_field: Optional[str] = None
    partial_upload_policy: PartialUploadPolicy = PartialUploadPolicy.BEST_EFFORT
    random_name_length: int = DEFAULT_RANDOM_NAME_LENGTH

    def __post_init__(self) -> None:
        # accept any iterable / plain strings from callers, store canonical forms
        object.__setattr__(self, "allowed_types", tuple(self.allowed_types))
        object.__setattr__(self, "partial_upload_policy", PartialUploadPolicy(self.partial_upload_policy))

    @property
    def upload_limit(self) -> int:
        return self.max_upload_size or DEFAULT_MAX_UPLOAD_SIZE

    @property
    def json_limit(self) -> int:
        return self.max_json_size or DEFAULT_MAX_JSON_SIZE

    def with_changes(self, **changes: Any) -> "ToolsSettings":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "ToolsSettings":
        """Build settings from a Flask config (or any mapping of Config keys)."""
        allowed: Iterable[str] = cfg.get("ALLOWED_TYPES") or ()
        if isinstance(allowed, str):
            allowed = _split_types(allowed)
        return cls(
            allowed_types=tuple(allowed),
            max_upload_size=int(cfg.get("MAX_UPLOAD_MB", 0) or 0) * 1024 * 1024,
            max_json_size=int(cfg.get("MAX_JSON_BYTES", 0) or 0),
            allow_unknown_fields=bool(cfg.get("ALLOW_UNKNOWN_FIELDS", False)),
            upload_field=cfg.get("UPLOAD_FIELD"),
            partial_upload_policy=cfg.get("PARTIAL_UPLOAD_POLICY", PartialUploadPolicy.BEST_EFFORT),
        )


def ensure_data_dirs(cfg: Mapping[str, Any]) -> None:
    """Ensure the configured upload directory exists."""
    os.makedirs(cfg["UPLOAD_DIR"], exist_ok=True)
