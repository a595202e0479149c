"""Flask request toolkit: safe uploads, strict JSON, and small HTTP helpers.

Defines `create_app()` to initialize a Flask app around a shared ``Tools``
instance, enable CORS, and register the demo route blueprints.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from toolkit.config import Config, ToolsSettings, ensure_data_dirs
from toolkit.routes.errors import register_error_handlers
from toolkit.routes.files import files_bp
from toolkit.routes.slug import slug_bp
from toolkit.routes.upload import upload_bp
from toolkit.tools import Tools

__all__ = ["Tools", "ToolsSettings", "create_app"]


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    ensure_data_dirs(app.config)

    app.extensions["toolkit"] = Tools(ToolsSettings.from_mapping(app.config))

    CORS(
        app,
        resources={r"/*": {"origins": "*"}},
        supports_credentials=False,
        expose_headers=["Content-Disposition"],
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "OPTIONS"],
    )

    # Blueprints
    app.register_blueprint(upload_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(slug_bp)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
