"""Configuration loading, validation, and run-mode resolution."""

from __future__ import annotations

import json
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validators

from loudspin.core.devices import check_pattern
from loudspin.core.errors import ConfigLoadError, ConfigValidationError
from loudspin.core.levels import LevelTable
from loudspin.core.model import (
    DEFAULT_HDPARM_PATH,
    Config,
    ListRequest,
    ResolvedRequest,
    SetLevelRequest,
    ShowRequest,
)

CONFIG_PATH = Path("/etc/loudspin.conf")
LOGGER = logging.getLogger(__name__)


def _load_schema_validator() -> Any:
    schema_text = resources.files("loudspin.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        config_file = path.open("rb")
    except OSError as exc:
        raise ConfigLoadError("error opening the configuration file") from exc

    with config_file:
        try:
            content = config_file.read()
        except OSError as exc:
            raise ConfigLoadError("error reading from the configuration file") from exc

    try:
        return tomllib.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigValidationError("error parsing the configuration") from exc


def _build_config(doc: dict[str, Any], source: Path) -> Config:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"error parsing the configuration{where}: {exc.message}") from None

    for pattern in doc["devices"]:
        check_pattern(pattern)

    levels = LevelTable(doc.get("levels", {}))
    levels.validate(source)

    return Config(
        hdparm_path=doc.get("hdparm_path", DEFAULT_HDPARM_PATH),
        devices=tuple(doc["devices"]),
        levels=levels,
    )


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Read, parse, and validate the configuration file at ``path``.

    Every check runs here so a malformed configuration is rejected before
    any capability is raised.
    """
    doc = _read_toml(path)
    config = _build_config(doc, path)
    LOGGER.debug("loaded configuration from %s", path)
    return config


def resolve_request(
    level: str | None = None,
    *,
    show_requested: bool = False,
    list_requested: bool = False,
) -> ResolvedRequest:
    """Combine command-line intent into a single run mode.

    List wins over everything and ignores ``level``; an explicit level wins
    over show; with neither, the current state is shown. The level name is
    only resolved later against the level table.
    """
    if list_requested:
        return ListRequest()
    if level is not None and not show_requested:
        return SetLevelRequest(name=level)
    return ShowRequest()
