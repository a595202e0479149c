"""UploadService: multipart file ingestion.

Walks the file parts of a multipart request in stream order and, per part:
peeks the first bytes, sniffs the real content type, checks it against the
allow-list, picks the output name (verbatim or randomized), makes sure the
destination directory exists and copies the part there.

The first failure aborts the whole call. Files already written by the same
call are kept or removed according to ``PartialUploadPolicy``; either way
they are not returned.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

from werkzeug.datastructures import FileStorage, ImmutableMultiDict
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.wrappers import Request

from toolkit.config import PartialUploadPolicy, ToolsSettings
from toolkit.errors import NoFileUploaded, RequestTooLarge, ToolkitError, UnsupportedFileType, UploadIOError
from toolkit.schemas import UploadedFile
from toolkit.utils.ids import random_string
from toolkit.utils.io_utils import chain_stream, contained_path, copy_chunks, ensure_dir, remove_quietly
from toolkit.utils.sniff import SNIFF_LEN, detect_content_type

logger = logging.getLogger(__name__)


def file_extension(filename: str) -> str:
    """Extension of the last path element, dot included ("" when absent)."""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot != -1 else ""


def output_filename(original: str, randomize: bool, length: int = 25) -> str:
    if not randomize:
        return original
    return f"{random_string(length)}{file_extension(original)}"


def validate_mime_type(mime_type: str, allowed: Iterable[str]) -> None:
    allowed = tuple(allowed)
    if allowed and mime_type not in allowed:
        raise UnsupportedFileType(mime_type)


class StreamOrderedMultiDict(ImmutableMultiDict):
    """``ImmutableMultiDict`` that also remembers its pairs in arrival order.

    Werkzeug's multipart parser hands over fields and files as a list of
    ``(name, value)`` pairs in stream order; a plain ``MultiDict`` groups
    them by name.
    """

    def __init__(self, mapping=None):
        super().__init__(mapping)
        if isinstance(mapping, (list, tuple)):
            self.stream_order = list(mapping)
        else:
            self.stream_order = list(self.items(multi=True))


class UploadService:
    def __init__(self, settings: ToolsSettings) -> None:
        self.settings = settings

    def upload_files(self, request: Request, destination: str, randomize: bool = True) -> List[UploadedFile]:
        """Store every file part of ``request`` under ``destination``."""
        return self._ingest(request, destination, randomize, first_only=False)

    def upload_one_file(self, request: Request, destination: str, randomize: bool = True) -> UploadedFile:
        """Store only the first file part; raise ``NoFileUploaded`` if there is none."""
        files = self._ingest(request, destination, randomize, first_only=True)
        if not files:
            raise NoFileUploaded()
        return files[0]

    def _file_parts(self, request: Request) -> Iterator[FileStorage]:
        limit = self.settings.upload_limit
        # both must be set before the form is parsed
        request.max_content_length = limit
        request.parameter_storage_class = StreamOrderedMultiDict
        try:
            files = request.files
        except RequestEntityTooLarge as e:
            raise RequestTooLarge(limit) from e

        field = self.settings.upload_field
        if field:
            parts = files.getlist(field)
        else:
            # a form parsed before we got here only knows per-field order
            pairs = getattr(files, "stream_order", None) or files.items(multi=True)
            parts = [part for _, part in pairs]
        for part in parts:
            if part.filename:
                yield part

    def _ingest(self, request: Request, destination: str, randomize: bool, first_only: bool) -> List[UploadedFile]:
        results: List[UploadedFile] = []
        written: List[str] = []
        try:
            for part in self._file_parts(request):
                results.append(self._store(part, destination, randomize, written))
                if first_only:
                    break
        except ToolkitError:
            if self.settings.partial_upload_policy is PartialUploadPolicy.ROLLBACK and written:
                logger.warning("Upload aborted; rolling back %d file(s) in %s", len(written), destination)
                for path in written:
                    remove_quietly(path)
            raise
        return results

    def _store(self, part: FileStorage, destination: str, randomize: bool, written: List[str]) -> UploadedFile:
        original = part.filename or ""
        try:
            head = part.stream.read(SNIFF_LEN)
        except OSError as e:
            raise UploadIOError(f"could not read {original}: {e}") from e
        mime_type = detect_content_type(head)
        logger.debug("Sniffed %s as %s (declared %s)", original, mime_type, part.mimetype or "-")

        try:
            validate_mime_type(mime_type, self.settings.allowed_types)
        except UnsupportedFileType:
            logger.warning("Rejected upload %s: type %s not allowed", original, mime_type)
            raise

        new_name = output_filename(original, randomize, self.settings.random_name_length)
        target = contained_path(destination, new_name)

        try:
            ensure_dir(destination)
        except OSError as e:
            raise UploadIOError(f"could not create upload directory {destination}: {e}") from e

        written.append(target)
        try:
            size = copy_chunks(chain_stream(head, part.stream), target)
        except OSError as e:
            raise UploadIOError(f"could not save {original} to {target}: {e}") from e

        logger.info("Saved upload %s as %s (%d bytes)", original, new_name, size)
        return UploadedFile(original_file_name=original, new_file_name=new_name, file_size=size)
