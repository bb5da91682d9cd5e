"""``specwiki config`` -- inspect and edit the user's saved defaults.

The saved file only supplies defaults: ``show`` prints what a command would
actually run with, after project config and environment variables are
applied, while ``set`` and ``reset`` change the user file alone.
"""

from __future__ import annotations

from typing import Any

import typer

from specwiki.exceptions import InvalidUsageError, SpecwikiError
from specwiki.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _fail(exc: SpecwikiError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _assign(data: dict[str, Any], key: str, value: str) -> Any:
    """Store *value* at the dotted *key* of *data* and return what was stored.

    Only existing leaf keys can be set. When the current value is an
    integer the new one must parse as an integer too.

    Raises:
        InvalidUsageError: If *key* names no setting or *value* has the
            wrong type.
    """
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section.get(part)
        if not isinstance(section, dict):
            raise InvalidUsageError(f"Unknown config key: {key}")
    if leaf not in section or isinstance(section[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    stored: Any = value
    if isinstance(section[leaf], int):
        try:
            stored = int(value)
        except ValueError:
            raise InvalidUsageError(f"{key} takes an integer, got: {value}") from None
    section[leaf] = stored
    return stored


@config_app.command("show")
def config_show() -> None:
    """Print the configuration commands will use.

    Example::

        specwiki --json config show
    """
    from specwiki.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except SpecwikiError as exc:
        raise _fail(exc) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted setting name, e.g. 'server.port'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one saved setting.

    Example::

        specwiki config set convert.output docs/api.txt
        specwiki config set server.port 8080
    """
    from pydantic import ValidationError

    from specwiki.config import load_global_config, save_global_config
    from specwiki.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
        stored = _assign(data, key, value)
        try:
            updated = GlobalConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Rejected value for {key}: {exc}") from exc
    except SpecwikiError as exc:
        raise _fail(exc) from None

    save_global_config(updated)
    success(f"Set {key} = {stored}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Discard saved settings and go back to the defaults."""
    from specwiki.config import save_global_config
    from specwiki.models import GlobalConfig

    if not yes and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        return

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
