"""Static file handler rooted at the configured directory."""

import html
import os
from pathlib import Path
from urllib.parse import quote

from flask import Response, abort, redirect, request, send_file
from werkzeug.security import safe_join

INDEX_FILE = "index.html"


def render_listing(directory: str) -> Response:
    """Plain HTML listing of a directory, sub-directories suffixed with ``/``."""
    lines = ["<pre>"]
    with os.scandir(directory) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            name = entry.name + ("/" if entry.is_dir() else "")
            lines.append(f'<a href="{quote(name)}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return Response("\n".join(lines) + "\n", status=200, mimetype="text/html")


def serve_path(root: str, subpath: str) -> Response:
    """
    Serve ``subpath`` below ``root``.

    Files are sent as-is. A directory is redirected to its slash form, then
    answered with its index.html or a listing. Anything outside ``root`` or
    missing is a 404.
    """
    root_path = str(Path(root).resolve())
    target = safe_join(root_path, subpath) if subpath else root_path
    if target is None:
        abort(404)

    if os.path.isdir(target):
        if not request.path.endswith("/"):
            location = request.path + "/"
            if request.query_string:
                location += "?" + request.query_string.decode("latin-1")
            return redirect(location, code=301)
        index = os.path.join(target, INDEX_FILE)
        if os.path.isfile(index):
            return send_file(index)
        return render_listing(target)

    if os.path.isfile(target):
        return send_file(target)
    abort(404)
