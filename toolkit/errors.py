"""Exception taxonomy raised by the toolkit.

Every failure reaches the immediate caller as one of these. The toolkit
does not pick HTTP status codes; handlers do (see ``toolkit.routes``).
"""

from __future__ import annotations

from typing import Optional


class ToolkitError(Exception):
    """Base class for all toolkit failures."""


# Uploads


class UploadError(ToolkitError):
    pass


class UnsupportedFileType(UploadError):
    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(f"the uploaded file type is not permitted: {mime_type}")


class RequestTooLarge(UploadError):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"request body must not be larger than {limit} bytes")


class UnsafeFilename(UploadError):
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"file name resolves outside the upload directory: {filename!r}")


class NoFileUploaded(UploadError):
    def __init__(self) -> None:
        super().__init__("no file was uploaded")


class UploadIOError(UploadError):
    """Directory creation, open or write failed; wraps the ``OSError``."""


# JSON request bodies


class JSONRequestError(ToolkitError):
    pass


class PayloadTooLarge(JSONRequestError):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"body must not be larger than {limit} bytes")


class EmptyBody(JSONRequestError):
    def __init__(self) -> None:
        super().__init__("body must not be empty")


class JSONSyntaxError(JSONRequestError):
    def __init__(self, offset: Optional[int] = None, truncated: bool = False) -> None:
        self.offset = offset
        self.truncated = truncated
        if truncated or offset is None:
            msg = "body contains badly-formed JSON"
        else:
            msg = f"body contains badly-formed JSON (at character {offset})"
        super().__init__(msg)


class TypeMismatch(JSONRequestError):
    def __init__(self, field: Optional[str] = None) -> None:
        self.field = field
        if field:
            msg = f"body contains incorrect JSON type for field {field!r}"
        else:
            msg = "body contains incorrect JSON type"
        super().__init__(msg)


class UnknownField(JSONRequestError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"body contains unknown key {field!r}")


class MissingField(JSONRequestError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"body is missing required key {field!r}")


class MultipleValues(JSONRequestError):
    def __init__(self) -> None:
        super().__init__("body must have only a single JSON value")


# Misc helpers


class RemoteRequestError(ToolkitError):
    """Outbound push failed at the transport level; wraps the requests error."""


class InvalidSlug(ToolkitError, ValueError):
    pass
