"""Upload routes: POST /upload and POST /upload/one

Accepts a multipart form, stores the file parts under the configured
upload directory (sniffed-type allow-list, optional random names) and
returns the JSON envelope with the stored file records.
"""

from __future__ import annotations

from flask import Blueprint, current_app, request

from toolkit.schemas import JSONResponse

upload_bp = Blueprint("upload", __name__)


def _randomize() -> bool:
    flag = request.args.get("randomize")
    if flag is None:
        return bool(current_app.config.get("RANDOMIZE_UPLOADS", True))
    return flag.lower() in {"1", "true", "yes"}


@upload_bp.route("/upload", methods=["POST"])
def upload():
    tools = current_app.extensions["toolkit"]
    files = tools.upload_files(request, current_app.config["UPLOAD_DIR"], _randomize())
    return tools.write_json(
        JSONResponse(message=f"{len(files)} file(s) uploaded", data=[f.model_dump() for f in files]),
        status=201,
    )


@upload_bp.route("/upload/one", methods=["POST"])
def upload_one():
    tools = current_app.extensions["toolkit"]
    uploaded = tools.upload_one_file(request, current_app.config["UPLOAD_DIR"], _randomize())
    return tools.write_json(JSONResponse(message="file uploaded", data=uploaded.model_dump()), status=201)
