"""Where specwiki keeps its settings, and how the effective settings are chosen.

Settings come in four layers, each overriding the one before it:

1. the user file ``config.json`` in :func:`get_config_dir` (or built-in
   defaults when there is none),
2. ``specwiki.json`` in the current directory, which may give any subset of
   keys,
3. the ``SPECWIKI_*`` environment variables,
4. command-line flags.

:func:`resolve_config` applies them in that order. Files are written with
:func:`atomic_write`, which the converter also uses for rendered pages.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from specwiki.exceptions import ConfigError
from specwiki.models import GlobalConfig

_APP_NAME = "specwiki"
_USER_FILE = "config.json"
_PROJECT_FILE = "specwiki.json"

ENV_INPUT = "SPECWIKI_INPUT"
ENV_OUTPUT = "SPECWIKI_OUTPUT"
ENV_HOST = "SPECWIKI_HOST"
ENV_PORT = "SPECWIKI_PORT"

# variable, section, field, parser
_ENV_OVERRIDES: tuple[tuple[str, str, str, Callable[[str], Any]], ...] = (
    (ENV_INPUT, "convert", "input", str),
    (ENV_OUTPUT, "convert", "output", str),
    (ENV_HOST, "server", "host", str),
    (ENV_PORT, "server", "port", int),
)


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_variable: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    """Return (and create) one of the application's directories.

    XDG platforms honour *xdg_variable*, defaulting to *xdg_default* under
    the home directory. Elsewhere everything lives in ``~/.specwiki``,
    optionally in the *fallback* sub-directory.
    """
    if _is_xdg_platform():
        root = os.environ.get(xdg_variable) or Path.home().joinpath(*xdg_default)
        directory = Path(root) / _APP_NAME
    else:
        directory = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/specwiki`` on Linux and BSD, ``~/.specwiki`` elsewhere."""
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_data_dir() -> Path:
    """Directory for crash logs.

    ``$XDG_DATA_HOME/specwiki`` on Linux and BSD, ``~/.specwiki/logs``
    elsewhere.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("logs",))


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The text goes to a hidden temporary file beside *path* first, so readers
    see either the old content or the new, never a partial file. The
    temporary file is removed if anything fails.

    Args:
        path: Destination file; missing parent directories are created.
        data: Text to write, encoded as UTF-8.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, temporary = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temporary, path)
    except BaseException:
        Path(temporary).unlink(missing_ok=True)
        raise


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Read the user's ``config.json``; defaults when the file is absent.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    path = get_config_dir() / _USER_FILE
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2)
    atomic_write(get_config_dir() / _USER_FILE, text + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``specwiki.json`` from the working directory.

    Returns:
        The raw object, or ``None`` when the directory has no such file.
        Keys are not checked here; :func:`resolve_config` validates the
        merged result.

    Raises:
        ConfigError: If the file is unreadable or its top level is not an
            object.
    """
    path = Path.cwd() / _PROJECT_FILE
    if not path.is_file():
        return None
    data = _read_json(path, "project")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _overlay(base: dict[str, Any], top: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in top.items():
        below = result.get(key)
        result[key] = _overlay(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return result


def resolve_config(
    cli_input: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_host: Optional[str] = None,
    cli_port: Optional[int] = None,
) -> GlobalConfig:
    """Combine every settings layer into the configuration to run with.

    The ``cli_*`` arguments are the command-line flags; ``None`` means the
    flag was not given.

    Raises:
        ConfigError: If a config file is invalid, or an environment
            variable cannot be converted to its field's type.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        try:
            config = GlobalConfig.model_validate(_overlay(config.model_dump(mode="json"), project))
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    for variable, section, field, parse in _ENV_OVERRIDES:
        raw = os.environ.get(variable)
        if not raw:
            continue
        try:
            value = parse(raw)
        except ValueError as exc:
            raise ConfigError(f"{variable} is not a valid {parse.__name__}: {raw}") from exc
        setattr(getattr(config, section), field, value)

    flags = (
        ("convert", "input", cli_input),
        ("convert", "output", cli_output),
        ("server", "host", cli_host),
        ("server", "port", cli_port),
    )
    for section, field, value in flags:
        if value is not None:
            setattr(getattr(config, section), field, value)
    return config
