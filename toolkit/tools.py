"""Tools: one configured entry point for every toolkit helper.

A ``Tools`` instance only holds a frozen ``ToolsSettings``; it is safe to
share across requests and threads. Use ``with_settings`` to derive a
variant (e.g. a different allow-list for one endpoint) instead of mutating.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

import requests
from flask import Response
from werkzeug.wrappers import Request

from toolkit.config import ToolsSettings
from toolkit.schemas import UploadedFile
from toolkit.services import download_service, json_service, remote_service
from toolkit.services.upload_service import UploadService
from toolkit.utils.ids import random_string
from toolkit.utils.io_utils import ensure_dir
from toolkit.utils.text import slugify

T = TypeVar("T")


class Tools:
    def __init__(self, settings: Optional[ToolsSettings] = None) -> None:
        self.settings = settings or ToolsSettings()
        self._uploads = UploadService(self.settings)

    def with_settings(self, **changes: Any) -> "Tools":
        return Tools(self.settings.with_changes(**changes))

    # Uploads

    def upload_files(self, request: Request, destination: str, randomize: bool = True) -> List[UploadedFile]:
        return self._uploads.upload_files(request, destination, randomize)

    def upload_one_file(self, request: Request, destination: str, randomize: bool = True) -> UploadedFile:
        return self._uploads.upload_one_file(request, destination, randomize)

    # JSON

    def read_json(self, request: Request, schema: Type[T]) -> T:
        return json_service.read_json(
            request,
            schema,
            max_size=self.settings.json_limit,
            allow_unknown_fields=self.settings.allow_unknown_fields,
        )

    def write_json(self, payload: Any, status: int = 200, headers: Optional[Mapping[str, str]] = None) -> Response:
        return json_service.write_json(payload, status=status, headers=headers)

    def error_json(self, err: BaseException, status: int = 400) -> Response:
        return json_service.error_json(err, status=status)

    # Misc

    def download_static_file(self, path: str, display_name: str) -> Response:
        return download_service.download_static_file(path, display_name)

    def push_json_to_remote(
        self, url: str, payload: Any, session: Optional[requests.Session] = None
    ) -> Tuple[requests.Response, int]:
        return remote_service.push_json_to_remote(url, payload, session=session)

    @staticmethod
    def random_string(n: int) -> str:
        return random_string(n)

    @staticmethod
    def slugify(text: str) -> str:
        return slugify(text)

    @staticmethod
    def create_dir_if_not_exist(path: str) -> None:
        ensure_dir(path)
