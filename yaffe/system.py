"""Operating-system services: file naming, shutdown, start-up tasks and the helper program."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Sequence

log = logging.getLogger(__name__)

HELPER_PATH = "./yaffe-helper"

_WINDOWS_FORBIDDEN = '"*<>?\\/:'
_POSIX_FORBIDDEN = "/\0"


class StartupError(Exception):
    """Raised when the run-at-startup task cannot be read or changed."""

    def __init__(self, message: str, access_denied: bool = False) -> None:
        super().__init__(message)
        self.access_denied = access_denied


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def lib_ext() -> str:
    """File extension of loadable plugin libraries on this system."""
    return "dll" if _is_windows() else "so"


def app_ext() -> str:
    """File extension of executables on this system (empty if none)."""
    return "exe" if _is_windows() else ""


def sanitize_file(file: str) -> str:
    """Remove the characters this system does not allow in file names."""
    forbidden = _WINDOWS_FORBIDDEN if _is_windows() else _POSIX_FORBIDDEN
    return file.translate({ord(c): None for c in forbidden})


def append_app_ext(path: str) -> str:
    """Add the executable extension, if the system has one, to ``path``."""
    ext = app_ext()
    return f"{path}.{ext}" if ext else path


def _run(command: List[str]) -> subprocess.CompletedProcess:
    return subprocess.run(command, capture_output=True, text=True)


def shutdown() -> None:
    """Power off the machine; raises ``OSError`` if the request fails."""
    if _is_windows():
        command = ["shutdown", "/s", "/t", "0"]
    else:
        command = ["shutdown", "-h", "now"]
    result = _run(command)
    if result.returncode != 0:
        raise OSError(result.stderr)


def _autostart_file(task: str) -> Path:
    return Path.home() / ".config" / "autostart" / f"{task}.desktop"


def _current_executable() -> Path:
    return Path(sys.argv[0] or sys.executable).resolve()


def _schtasks(args: List[str]) -> subprocess.CompletedProcess:
    try:
        return _run(["schtasks", *args])
    except OSError as e:
        raise StartupError(str(e)) from e


def _schtasks_error(result: subprocess.CompletedProcess) -> StartupError:
    message = (result.stderr or result.stdout or "").strip()
    return StartupError(
        f"schtasks: {message or result.returncode}",
        access_denied="access is denied" in message.lower(),
    )


def get_run_at_startup(task: str) -> bool:
    """Whether ``task`` is registered to run when the user logs on."""
    if _is_windows():
        return _schtasks(["/Query", "/TN", task]).returncode == 0
    return _autostart_file(task).exists()


def set_run_at_startup(task: str, run: bool) -> None:
    """Register or remove ``task`` so that this program runs at log-on."""
    if _is_windows():
        if not run:
            result = _schtasks(["/Delete", "/TN", task, "/F"])
            if result.returncode != 0:
                raise _schtasks_error(result)
        elif not get_run_at_startup(task):
            result = _schtasks(
                [
                    "/Create",
                    "/TN", task,
                    "/TR", f'"{_current_executable()}"',
                    "/SC", "ONLOGON",
                    "/RL", "HIGHEST",
                    "/F",
                ]
            )
            if result.returncode != 0:
                raise _schtasks_error(result)
        return

    path = _autostart_file(task)
    try:
        if not run and path.exists():
            path.unlink()
        elif run and not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            contents = "\n".join(
                [
                    "[Desktop Entry]",
                    "Type=Application",
                    f"Name={task}",
                    f"Exec={_current_executable()}",
                    "StartupNotify=false",
                    "Terminal=false",
                    "Hidden=false",
                    "",
                ]
            )
            path.write_text(contents, encoding="utf-8")
    except OSError as e:
        raise StartupError(str(e)) from e


def yaffe_helper(action: str, args: Sequence[str]) -> subprocess.Popen:
    """Start the helper program with ``action`` and its arguments."""
    command = [append_app_ext(HELPER_PATH), action, *args]
    log.info("Starting helper %s", command)
    return subprocess.Popen(command, stdout=subprocess.PIPE)