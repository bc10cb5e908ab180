"""Settings file loading, querying and saving.

A settings file holds one setting per line in the form
``name: type = value`` where type is one of ``f32``, ``i32``, ``str`` or
``color``. Lines starting with ``#`` and empty lines are ignored.
"""

from __future__ import annotations

import math
import os
import re
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

Color = Tuple[float, float, float, float]
SettingValue = Union[float, int, str, Color]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class SettingLoadError(ValueError):
    """Raised when a settings file or a setting value cannot be parsed."""


class SettingName(Enum):
    """Every known setting, valued by its name in the settings file."""

    INFO_FONT_SIZE = "info_font_size"
    LIGHT_SHADE_FACTOR = "light_shade_factor"
    DARK_SHADE_FACTOR = "dark_shade_factor"
    INFO_SCROLL_SPEED = "info_scroll_speed"
    MAX_ROWS = "max_rows"
    MAX_COLUMNS = "max_columns"
    FONT_COLOR = "font_color"
    ACCENT_COLOR = "accent_color"
    RECENT_PAGE_COUNT = "recent_page_count"
    ASSET_CACHE_SIZE_MB = "asset_cache_size_mb"
    LOGGING_LEVEL = "logging_level"

    def default(self) -> SettingValue:
        """The value used when the setting is not configured."""
        return _DEFAULTS[self]


_DEFAULTS: Dict[SettingName, SettingValue] = {
    SettingName.INFO_FONT_SIZE: 24.0,
    SettingName.LIGHT_SHADE_FACTOR: 0.3,
    SettingName.DARK_SHADE_FACTOR: -0.6,
    SettingName.INFO_SCROLL_SPEED: 20.0,
    SettingName.MAX_ROWS: 4,
    SettingName.MAX_COLUMNS: 4,
    SettingName.FONT_COLOR: (0.95, 0.95, 0.95, 1.0),
    SettingName.ACCENT_COLOR: (0.25, 0.3, 1.0, 1.0),
    SettingName.RECENT_PAGE_COUNT: 1.0,
    SettingName.ASSET_CACHE_SIZE_MB: 64,
    SettingName.LOGGING_LEVEL: "Info",
}


def _type_tag(value: SettingValue) -> str:
    if isinstance(value, tuple):
        return "color"
    if isinstance(value, str):
        return "str"
    if isinstance(value, float):
        return "f32"
    if isinstance(value, int) and not isinstance(value, bool):
        return "i32"
    raise TypeError(f"unsupported setting value {value!r}")


def _parse_f32(text: str) -> float:
    if "_" in text:
        raise SettingLoadError(f"invalid float literal {text!r}")
    try:
        return float(text)
    except ValueError as e:
        raise SettingLoadError(f"invalid float literal {text!r}") from e


def _parse_i32(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise SettingLoadError(f"invalid integer literal {text!r}")
    value = int(text)
    if not _I32_MIN <= value <= _I32_MAX:
        raise SettingLoadError(f"integer out of range {text!r}")
    return value


def _parse_value(tag: str, text: str) -> SettingValue:
    if tag == "f32":
        return _parse_f32(text)
    if tag == "i32":
        return _parse_i32(text)
    if tag == "str":
        return text
    if tag == "color":
        return color_from_string(text)
    raise SettingLoadError(f"invalid setting type {tag!r}")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def _format_value(value: SettingValue) -> str:
    tag = _type_tag(value)
    if tag == "f32":
        return _format_float(value)  # type: ignore[arg-type]
    if tag == "color":
        return rgba_string(value)  # type: ignore[arg-type]
    return str(value)


def color_from_string(value: str) -> Color:
    """Parse ``"r, g, b, a"`` into a colour tuple."""
    parts = value.split(",")
    if len(parts) < 4:
        raise SettingLoadError(f"a colour needs four components: {value!r}")
    r, g, b, a = (_parse_f32(p.strip()) for p in parts[:4])
    return (r, g, b, a)


def rgba_string(color: Color) -> str:
    """Format a colour tuple so that ``color_from_string`` reads it back."""
    return ", ".join(_format_float(float(c)) for c in color)


def setting_from_string(
    default: SettingValue, value: str, allow_clear: bool
) -> Optional[SettingValue]:
    """Parse ``value`` as the same type as ``default``.

    Returns ``None`` for an empty value, or when ``allow_clear`` is set and
    the parsed value equals ``default``.
    """
    if not value:
        return None
    parsed = _parse_value(_type_tag(default), value)
    if allow_clear and parsed == default:
        return None
    return parsed


def load_settings_from_path(path: Union[str, os.PathLike]) -> Dict[str, SettingValue]:
    """Read the settings stored in a file."""
    data = Path(path).read_text(encoding="utf-8")
    settings: Dict[str, SettingValue] = {}
    for raw in data.split("\n"):
        line = raw[:-1] if raw.endswith("\r") else raw
        if not line or line.startswith("#"):
            continue
        colon = line.find(":")
        if colon < 0:
            raise SettingLoadError(f"incorrect format: {line!r}")
        key, type_value = line[:colon], line[colon:]
        equals = type_value.find("=")
        if equals < 0:
            raise SettingLoadError(f"incorrect format: {line!r}")
        tag = type_value[1:equals].strip()
        text = type_value[equals + 1:].strip()
        settings[key.strip()] = _parse_value(tag, text)
    return settings


@dataclass
class SettingsFile:
    """Configured settings together with the file they came from."""

    settings: Dict[str, SettingValue] = field(default_factory=dict)
    path: Optional[Path] = None
    last_write: float = field(default_factory=time.time)

    def _get(self, setting: SettingName, tag: str) -> SettingValue:
        value = self.settings.get(setting.value, setting.default())
        if _type_tag(value) != tag:
            raise TypeError("Accessed setting using incorrect type")
        return value

    def get_f32(self, setting: SettingName) -> float:
        return self._get(setting, "f32")  # type: ignore[return-value]

    def get_i32(self, setting: SettingName) -> int:
        return self._get(setting, "i32")  # type: ignore[return-value]

    def get_str(self, setting: SettingName) -> str:
        return self._get(setting, "str")  # type: ignore[return-value]

    def get_color(self, setting: SettingName) -> Color:
        return self._get(setting, "color")  # type: ignore[return-value]

    def get_full_settings(self) -> List[Tuple[str, SettingValue]]:
        """Every known setting with its configured or default value."""
        return [
            (name.value, self.settings.get(name.value, name.default()))
            for name in SettingName
        ]

    def set_setting(self, name: str, value: str) -> None:
        """Set a setting from text; an empty or default value removes it."""
        setting = SettingName(name)
        parsed = setting_from_string(setting.default(), value, True)
        if parsed is None:
            self.settings.pop(name, None)
        else:
            self.settings[name] = parsed

    def serialize(self) -> None:
        """Write the configured settings back to the existing settings file."""
        if self.path is None:
            raise FileNotFoundError("settings file has no path")
        with open(self.path, "r+", encoding="utf-8") as f:
            f.truncate()
            for key, value in self.settings.items():
                f.write(f"{key}: {_type_tag(value)} = {_format_value(value)}\n")


def load_settings(path: Union[str, os.PathLike]) -> SettingsFile:
    """Load a settings file, remembering its path and modification time."""
    path = Path(path)
    last_write = path.stat().st_mtime
    return SettingsFile(load_settings_from_path(path), path, last_write)


def update_settings(settings: SettingsFile) -> bool:
    """Reload ``settings`` if its file changed; return whether it did."""
    if settings.path is None or not settings.path.exists():
        return False
    last_write = settings.path.stat().st_mtime
    if last_write > settings.last_write:
        settings.last_write = last_write
        settings.settings = load_settings_from_path(settings.path)
        return True
    return False