# yaffe

The core of a fullscreen front-end that organises emulators and their games
into groups of tiles and starts them with a controller or keyboard.

## What it provides

- `yaffe.settings`: reads and writes the `name: type = value` settings file
  (`f32`, `i32`, `str` and `color` values; lines starting with `#` are
  comments). `load_settings` loads a file, `update_settings` reloads it when
  its modification time changes, and `SettingsFile.get_f32`, `get_i32`,
  `get_str` and `get_color` fall back to the defaults of `SettingName`
  (for example `SettingName.MAX_ROWS` is 4). Parse failures raise
  `SettingLoadError`.
- `yaffe.state`: `TileGroup` for emulators, recent games and plugins, `Tile`,
  metadata filters (`MetadataSearch`), the selection (`SelectedItem`),
  `ChildProcess` for a launched program, and `YaffeState`, which hands jobs to
  any object with a `submit(job)` method.
- `yaffe.platform`: `scan_new_files` queues a game search for every unknown
  file in each emulator's `Roms/<name>` folder; `clean_file_name` moves a word
  after a comma to the front and drops everything from the first `(` or `[`,
  so that the stem `Legend of Zelda, The (USA)` becomes, once stripped,
  `The Legend of Zelda`; `create_platform_folders` makes the rom and asset
  folders for a new platform.
- `yaffe.restrictions`: passcode-protected restricted mode
  (`RestrictedPasscode`, `apply_passcode`, `verify_restricted_action`).
- `yaffe.input`: keyboard keys and controller buttons mapped to `Action`s
  (`default_input_map`, `input_to_actions`).
- `yaffe.gamepad`: turns successive controller states into newly pressed
  inputs (`GamepadTracker`), decodes Linux joystick events
  (`parse_js_events`, `apply_js_event`) and reads a `js<N>` device without
  blocking (`LinuxJoystick`).
- `yaffe.job_system`: `JobSystem`, a pool of worker threads (8 by default)
  that runs `Job`s through a handler you supply and collects their
  `JobResult`s, plus `process_results` and `generate_job_id`.
- `yaffe.pooled_cache`: `PooledCache`, a key/value cache stored in fixed-size
  pools.
- `yaffe.geometry`: `LogicalPosition`, `PhysicalPosition` and `Rect`.
- `yaffe.system`: library and executable extensions, file-name sanitising
  (`sanitize_file`), `shutdown`, run-at-startup registration
  (`get_run_at_startup`, `set_run_at_startup`) and starting the helper
  program (`yaffe_helper`).
- `yaffe.logger`: `init` writes log records to `./log.txt`, `set_log_level`
  takes `off`, `error`, `warn`, `info`, `debug` or `trace`, and
  `suppress_and_log` and `require` log failures.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## The helper command

`yaffe-helper` performs tasks that must run outside the main program:

```
yaffe-helper update ./yaffe-rs.update ./yaffe-rs
```

moves the update file over the application and starts it again, and

```
yaffe-helper webview https://example.com
```

opens the page in the system's web browser. An unknown action or a missing
argument exits with status 1.

## Example

```python
from yaffe.settings import load_settings, SettingName

settings = load_settings("./yaffe.settings")
rows = settings.get_i32(SettingName.MAX_ROWS)
```

## What it does not do

The package has no windows, rendering or on-screen menus, no game database,
no loading of plugins and no online search for game or platform information.
`JobSystem` runs whatever handler it is given; what a `SEARCH_GAME` or
`LOAD_IMAGE` job does is up to that handler. `scan_new_files` asks a function
you pass in whether a game is already known.