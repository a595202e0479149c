"""Files route: GET /download/<name>

Serves a stored upload as an attachment. ``?as=<display name>`` controls
the file name offered to the browser (defaults to the stored name).
"""

from __future__ import annotations

import os

from flask import Blueprint, current_app, request

from toolkit.errors import UnsafeFilename
from toolkit.utils.io_utils import contained_path

files_bp = Blueprint("files", __name__)


@files_bp.get("/download/<path:name>")
def download(name: str):
    tools = current_app.extensions["toolkit"]
    try:
        path = contained_path(current_app.config["UPLOAD_DIR"], name)
    except UnsafeFilename as e:
        return tools.error_json(e, 404)
    if not os.path.isfile(path):
        return tools.error_json(FileNotFoundError(f"file not found: {name}"), 404)
    return tools.download_static_file(path, request.args.get("as") or os.path.basename(path))
