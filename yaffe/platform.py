"""Scanning rom folders and preparing folders for new platforms."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Union

from .job_system import Job, JobKind, generate_job_id
from .state import GroupType, YaffeState

log = logging.getLogger(__name__)

_IGNORED_EXTENSIONS = frozenset({"ini", "srm"})


def clean_file_name(file: str) -> str:
    """Turn a rom file stem into a searchable game name.

    A word following a comma is moved to the front ("Zelda, The" becomes
    "The Zelda") and everything from the first ``(`` or ``[`` on, which
    usually holds a region or language, is dropped. The result may carry
    surrounding spaces.
    """
    cleaned = ""
    index = 0
    i = 0
    chars = iter(file)
    for c in chars:
        if c == ",":
            # Take everything up to the comma, then move the next word to the front.
            cleaned += file[index:i]
            next(chars, None)
            i += 1
            found = next((p for p, cc in enumerate(chars) if cc == " "), None)
            ii = (found if found is not None else len(file) - i - 1) + 1
            cleaned = file[i:i + ii] + cleaned
            cleaned = cleaned[:ii] + " " + cleaned[ii:]
            i += ii
            index += i
        elif c in "([":
            break
        i += 1
    if index < len(file):
        cleaned += file[index:i]
    return cleaned


def _extension(name: str) -> Union[str, None]:
    if name == "..":
        return None
    before, dot, after = name.rpartition(".")
    if not dot or not before:
        return None
    return after


def is_allowed_file_type(path: Union[str, os.PathLike]) -> bool:
    """Whether a file in a rom folder is a game rather than a save or config file."""
    ext = _extension(Path(path).name)
    return ext is not None and ext not in _IGNORED_EXTENSIONS


def scan_new_files(state: YaffeState, game_exists: Callable[[int, str], bool]) -> int:
    """Queue a game search for every rom file not yet known.

    ``game_exists(platform_id, file_name)`` tells whether a game is already
    stored. Every search shares one job id; when any are started a toast
    keyed by that id is shown. Returns the number of searches started.
    """
    count = 0
    job_id = generate_job_id()
    for group in state.groups:
        if group.kind is not GroupType.EMULATOR:
            continue
        for path in sorted(group.rom_path().iterdir()):
            if not (path.is_file() and is_allowed_file_type(path)):
                continue
            file = path.name
            log.info("Found local game %s", file)
            if game_exists(group.id, file):
                continue
            name = clean_file_name(path.stem).strip()
            log.info("%s not found in database, performing search", name)
            state.start_job(
                Job(
                    JobKind.SEARCH_GAME,
                    {"id": job_id, "exe": file, "name": name, "platform": group.id},
                )
            )
            count += 1

    if count:
        state.toasts[job_id] = f"Found {count} new files, searching for information..."
    return count


def create_platform_folders(
    platform_name: str, root: Union[str, os.PathLike] = "."
) -> Path:
    """Create the rom and asset folders for a platform under ``root``.

    The ``Roms`` folder is created when missing; the ``Assets`` folder must
    already exist. Returns the platform's rom folder.
    """
    log.info("Creating folders for platform %s", platform_name)
    base = Path(root)
    roms = base / "Roms"
    roms.mkdir(exist_ok=True)
    rom_path = roms / platform_name
    rom_path.mkdir(exist_ok=True)
    (base / "Assets" / platform_name).mkdir(exist_ok=True)
    return rom_path