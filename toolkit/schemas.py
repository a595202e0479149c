"""Request/response schemas shared by the toolkit and its routes.

Holds Pydantic models for upload results, the JSON response envelope,
and the small request bodies accepted by the demo endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UploadedFile(BaseModel):
    """One ingested multipart part, as written to disk."""

    model_config = ConfigDict(frozen=True)

    original_file_name: str
    new_file_name: str
    file_size: int = Field(ge=0)


class JSONResponse(BaseModel):
    error: bool = False
    message: str = ""
    data: Any = None

    def to_payload(self) -> dict:
        payload = self.model_dump(mode="json")
        if self.data is None:
            payload.pop("data")
        return payload


class SlugRequest(BaseModel):
    text: str
