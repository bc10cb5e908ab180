"""Helper program: applies downloaded updates and opens web pages."""

from __future__ import annotations

import os
import subprocess
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional, Union

UPDATE_FILE_PATH = "./yaffe-rs.update"

PathLike = Union[str, "os.PathLike[str]"]


def apply_update(patch: PathLike, app: PathLike) -> bool:
    """Replace ``app`` with ``patch`` and start it again.

    Failures are reported on standard output. Returns whether the patch
    file replaced the application.
    """
    print("Applying patch file")
    if not Path(patch).exists():
        return False

    applied = True
    try:
        os.replace(patch, app)
    except OSError as e:
        print(repr(e))
        applied = False

    try:
        subprocess.Popen([os.fspath(app)])
    except OSError as e:
        print(repr(e))
    return applied


def open_webview(url: str) -> bool:
    """Show ``url`` in a browser window; returns whether one was opened."""
    return webbrowser.open(url)


def main(argv: Optional[List[str]] = None) -> int:
    """Run ``webview <url>`` or ``update <patch> <app>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        return 1
    action, rest = args[0], args[1:]
    if action == "webview":
        if not rest:
            return 1
        open_webview(rest[0])
        return 0
    if action == "update":
        if len(rest) < 2:
            return 1
        apply_update(rest[0], rest[1])
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())