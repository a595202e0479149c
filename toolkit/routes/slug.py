from __future__ import annotations

from flask import Blueprint, current_app, request

from toolkit.schemas import JSONResponse, SlugRequest

slug_bp = Blueprint("slug", __name__)


@slug_bp.route("/slug", methods=["POST"])
def make_slug():
    tools = current_app.extensions["toolkit"]
    payload = tools.read_json(request, SlugRequest)
    return tools.write_json(JSONResponse(message="ok", data={"slug": tools.slugify(payload.text)}))
