"""Application state: groups of tiles, selection, metadata filters."""

from __future__ import annotations

import string
import subprocess
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .job_system import Job
from .logger import suppress_and_log
from .restrictions import RestrictedPasscode
from .settings import SettingsFile

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

RESTRICTED_RATINGS = frozenset(
    {"M - Mature 17+", "Restricted", "Not Rated", "AO - Adult Only 18+"}
)

RATINGS = (
    "E - Everyone",
    "E10+ - Everyone 10+",
    "T - Teen",
    "M - Mature 17+",
    "AO - Adult Only 18+",
    "RP - Rating Pending",
    "Not Rated",
    "Restricted",
)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _matches_option(metadata: str, option: str) -> bool:
    return _ascii_lower(metadata).startswith(_ascii_lower(option))


class GroupType(Enum):
    EMULATOR = auto()
    PLUGIN = auto()
    RECENTS = auto()

    def allow_edit(self) -> bool:
        return self is GroupType.EMULATOR

    def show_count(self) -> bool:
        return self in (GroupType.EMULATOR, GroupType.RECENTS)


@dataclass
class Tile:
    """A launchable item shown in a group."""

    file: str
    name: str
    description: str
    group_id: int
    boxart: Any
    metadata: Dict[str, str] = field(default_factory=dict)
    restricted: bool = False

    @classmethod
    def for_game(
        cls,
        file: str,
        name: str,
        description: str,
        players: int,
        rating: str,
        released: str,
        group_id: int,
        boxart: Path,
    ) -> "Tile":
        """A tile for a game stored in the database."""
        metadata = {"Players": str(players), "Rating": rating, "Released": released}
        return cls(
            file=file,
            name=name,
            description=description,
            group_id=group_id,
            boxart=boxart,
            metadata=metadata,
            restricted=rating in RESTRICTED_RATINGS,
        )

    def get_metadata(self, key: str) -> Optional[str]:
        """The tile's value for ``key``; ``"Name"`` is the tile's name."""
        if key == "Name":
            return self.name
        return self.metadata.get(key)


@dataclass
class MetadataSearch:
    """A filter over one metadata field, with a selectable option."""

    name: str
    options: List[str]
    mask: int = 0
    selected: Optional[int] = None

    @classmethod
    def from_range(cls, name: str, start: str, end: str) -> "MetadataSearch":
        """Options for every character from the first of ``start`` to that of ``end``."""
        first = ord(start[0]) & 0xFF
        last = ord(end[0]) & 0xFF
        options = [chr(c) if c < 0x80 else "" for c in range(first, last + 1)]
        return cls(name, options)

    def get_selected(self) -> Optional[str]:
        if self.selected is None:
            return None
        return self.options[self.selected]

    def set_mask(self, tiles: Iterable[Tile]) -> None:
        """Mark which options match at least one of ``tiles``."""
        mask = 0
        for tile in tiles:
            value = tile.get_metadata(self.name)
            if value is None:
                continue
            for i, option in enumerate(self.options):
                if _matches_option(value, option):
                    mask |= 1 << i
        self.mask = mask

    def increment_index(self, amount: int) -> None:
        """Move the selection by ``amount`` to the next option present in the mask.

        Moving before the first option or past the last clears the selection.
        """
        if amount == 0:
            raise ValueError("amount must not be zero")
        i = -1 if self.selected is None else self.selected
        while True:
            i += amount
            if i <= -1:
                self.selected = None
                return
            if self.mask & (1 << i):
                self.selected = i
                return
            if i >= len(self.options):
                self.selected = None
                return

    def item_is_visible(self, tile: Tile) -> bool:
        """Whether ``tile`` passes the selected option (always, with none selected)."""
        if self.selected is None:
            return True
        value = tile.get_metadata(self.name)
        return value is not None and _matches_option(value, self.options[self.selected])


@dataclass
class TileGroup:
    """A platform, plugin or the recent-games list, with its tiles."""

    id: int
    name: str
    kind: GroupType
    tiles: List[Tile] = field(default_factory=list)
    search: List[MetadataSearch] = field(default_factory=list)

    @classmethod
    def emulator(cls, group_id: int, name: str) -> "TileGroup":
        return cls(
            id=group_id,
            name=name,
            kind=GroupType.EMULATOR,
            search=[
                MetadataSearch.from_range("Players", "1", "4"),
                MetadataSearch("Rating", list(RATINGS)),
            ],
        )

    @classmethod
    def recents(cls, name: str) -> "TileGroup":
        return cls(id=-1, name=name, kind=GroupType.RECENTS)

    @classmethod
    def plugin(
        cls, plugin_index: int, name: str, filters: Iterable[Tuple[str, Sequence[str]]]
    ) -> "TileGroup":
        """A plugin group; ``filters`` are ``(name, options)`` pairs."""
        return cls(
            id=plugin_index,
            name=name,
            kind=GroupType.PLUGIN,
            search=[MetadataSearch(fname, list(options)) for fname, options in filters],
        )

    def rom_path(self) -> Path:
        return Path("./Roms") / self.name


@dataclass
class SelectedItem:
    group_index: int = 0
    tile_index: int = 0

    def prev_platform(self) -> None:
        if self.group_index > 0:
            self.group_index -= 1
            self.tile_index = 0

    def next_platform(self, max_count: int) -> None:
        if self.group_index < max_count - 1:
            self.group_index += 1
            self.tile_index = 0


class ChildProcess:
    """A launched external program."""

    def __init__(self, process: subprocess.Popen) -> None:
        self.process = process

    def is_running(self) -> bool:
        try:
            return self.process.poll() is None
        except OSError:
            with suppress_and_log("Unable to determine process status"):
                self.process.kill()
            return False

    def kill(self) -> None:
        self.process.kill()


class JobQueue(Protocol):
    def submit(self, job: Job) -> None: ...


@dataclass
class YaffeState:
    """Everything the main window works on."""

    queue: JobQueue
    settings: SettingsFile = field(default_factory=SettingsFile)
    selected: SelectedItem = field(default_factory=SelectedItem)
    groups: List[TileGroup] = field(default_factory=list)
    plugins: List[Any] = field(default_factory=list)
    toasts: Dict[int, str] = field(default_factory=dict)
    filter: Optional[MetadataSearch] = None
    restricted_mode: Optional[RestrictedPasscode] = None
    refresh_list: bool = True
    running: bool = True
    overlay: Any = None

    def selected_group(self) -> TileGroup:
        return self.groups[self.selected.group_index]

    def selected_tile(self) -> Optional[Tile]:
        tiles = self.selected_group().tiles
        if self.selected.tile_index < len(tiles):
            return tiles[self.selected.tile_index]
        return None

    def find_group(self, group_id: int) -> Optional[TileGroup]:
        return next((g for g in self.groups if g.id == group_id), None)

    def start_job(self, job: Job) -> None:
        self.queue.submit(job)