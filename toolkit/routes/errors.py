from __future__ import annotations

from flask import Flask, Response, current_app

from toolkit.errors import (
    PayloadTooLarge,
    RemoteRequestError,
    RequestTooLarge,
    ToolkitError,
    UploadIOError,
)


def status_for(err: ToolkitError) -> int:
    if isinstance(err, (RequestTooLarge, PayloadTooLarge)):
        return 413
    if isinstance(err, UploadIOError):
        return 500
    if isinstance(err, RemoteRequestError):
        return 502
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ToolkitError)
    def handle_toolkit_error(err: ToolkitError) -> Response:
        status = status_for(err)
        if status >= 500:
            current_app.logger.exception("Request failed: %s", err)
        return current_app.extensions["toolkit"].error_json(err, status)
