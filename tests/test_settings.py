import os

import pytest

from yaffe.settings import (
    SettingLoadError,
    SettingName,
    SettingsFile,
    color_from_string,
    load_settings,
    load_settings_from_path,
    rgba_string,
    setting_from_string,
    update_settings,
)


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_when_unconfigured():
    s = SettingsFile()
    assert s.get_f32(SettingName.INFO_FONT_SIZE) == 24.0
    assert s.get_i32(SettingName.MAX_ROWS) == 4
    assert s.get_str(SettingName.LOGGING_LEVEL) == "Info"
    assert s.get_color(SettingName.ACCENT_COLOR) == (0.25, 0.3, 1.0, 1.0)


def test_wrong_type_access_raises():
    s = SettingsFile()
    with pytest.raises(TypeError):
        s.get_i32(SettingName.INFO_FONT_SIZE)
    with pytest.raises(TypeError):
        s.get_str(SettingName.FONT_COLOR)


def test_full_settings_cover_every_name_in_order():
    s = SettingsFile(settings={"max_rows": 7})
    full = s.get_full_settings()
    assert [name for name, _ in full] == [n.value for n in SettingName]
    assert dict(full)["max_rows"] == 7
    assert dict(full)["info_font_size"] == SettingName.INFO_FONT_SIZE.default()


def test_load_from_path_parses_all_types(tmp_path):
    path = write(
        tmp_path / "a.settings",
        "# comment\n"
        "\n"
        "info_font_size: f32 = 30.5\n"
        "max_rows : i32 = 6\r\n"
        "logging_level: str = Warn\n"
        "font_color: color = 0.1, 0.2, 0.3, 1\n",
    )
    loaded = load_settings_from_path(path)
    assert loaded == {
        "info_font_size": 30.5,
        "max_rows": 6,
        "logging_level": "Warn",
        "font_color": (0.1, 0.2, 0.3, 1.0),
    }


@pytest.mark.parametrize(
    "line",
    [
        "no separator here\n",
        "max_rows: i32 6\n",
        "max_rows: int = 6\n",
        "max_rows: i32 = six\n",
        "info_font_size: f32 = 1_0\n",
        "font_color: color = 1, 2\n",
    ],
)
def test_load_rejects_bad_lines(tmp_path, line):
    path = write(tmp_path / "bad.settings", line)
    with pytest.raises(SettingLoadError):
        load_settings_from_path(path)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.settings")


def test_setting_from_string_rules():
    assert setting_from_string(4, "", True) is None
    assert setting_from_string(4, "4", True) is None
    assert setting_from_string(4, "4", False) == 4
    assert setting_from_string(24.0, "12.5", True) == 12.5
    assert setting_from_string("Info", "Info", True) is None
    assert setting_from_string("Info", "Trace", True) == "Trace"
    with pytest.raises(SettingLoadError):
        setting_from_string(4, "x", True)


def test_set_setting_adds_and_clears():
    s = SettingsFile()
    s.set_setting("max_columns", "9")
    assert s.get_i32(SettingName.MAX_COLUMNS) == 9
    s.set_setting("max_columns", "4")
    assert "max_columns" not in s.settings
    s.set_setting("logging_level", "Trace")
    s.set_setting("logging_level", "")
    assert "logging_level" not in s.settings


def test_set_unknown_setting_raises():
    with pytest.raises(ValueError):
        SettingsFile().set_setting("not_a_setting", "1")


def test_color_string_round_trip():
    color = (0.95, 0.5, 0.25, 1.0)
    assert color_from_string(rgba_string(color)) == color
    assert color_from_string(" 0.1 ,0.2, 0.3 ,0.4") == (0.1, 0.2, 0.3, 0.4)


def test_serialize_round_trip(tmp_path):
    path = write(tmp_path / "yaffe.settings", "")
    s = load_settings(path)
    s.set_setting("info_font_size", "18.25")
    s.set_setting("max_rows", "-3")
    s.set_setting("logging_level", "Debug")
    s.set_setting("accent_color", "0.5, 0.5, 0.5, 0.75")
    s.set_setting("dark_shade_factor", "0.00001")
    s.serialize()
    assert load_settings_from_path(path) == s.settings


def test_serialize_without_file_raises(tmp_path):
    s = SettingsFile(path=tmp_path / "gone.settings")
    s.set_setting("max_rows", "2")
    with pytest.raises(FileNotFoundError):
        s.serialize()


def test_update_settings_reloads_changed_file(tmp_path):
    path = write(tmp_path / "yaffe.settings", "max_rows: i32 = 2\n")
    s = load_settings(path)
    assert update_settings(s) is False

    write(path, "max_rows: i32 = 5\n")
    later = s.last_write + 10
    os.utime(path, (later, later))
    assert update_settings(s) is True
    assert s.get_i32(SettingName.MAX_ROWS) == 5
    assert update_settings(s) is False


def test_update_settings_without_file():
    assert update_settings(SettingsFile()) is False