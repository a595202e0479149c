from __future__ import annotations

from flask import Response, send_file


def download_static_file(path: str, display_name: str) -> Response:
    """Serve ``path`` as an attachment named ``display_name``.

    ``send_file`` sets Content-Length and streams the body; the disposition
    is written out explicitly so the file name is always quoted.
    """
    resp = send_file(path, as_attachment=True, download_name=display_name)
    resp.headers["Content-Disposition"] = f'attachment; filename="{display_name}"'
    return resp
