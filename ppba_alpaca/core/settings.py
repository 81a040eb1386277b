"""Settings loading and validation for YAML-based ppba-alpaca configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from ppba_alpaca.core.errors import SettingsError, SettingsValidationError

CONFIG_ENV_VAR = "PPBA_ALPACA_CONFIG"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise SettingsValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class Settings:
    server_address: str = "0.0.0.0"
    server_port: int = 11111
    serial_port: str = "/dev/ttyUSB0"
    baud_rate: int = 9600
    device_number: int = 0
    device_numbers: tuple[int, ...] = ()
    read_timeout_ms: int = 1000
    write_timeout_ms: int = 1000
    service_name: str = "PPBA Switch"
    advertise: bool = True
    log_level: str = "INFO"
    log_dir: str | None = None

    @property
    def devices(self) -> tuple[int, ...]:
        """Relay channels to expose; falls back to the single ``device_number``."""
        return self.device_numbers or (self.device_number,)

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["device_numbers"] = list(self.devices)
        return data


def _load_schema_validator() -> Any:
    schema_text = resources.files("ppba_alpaca.schemas").joinpath("settings.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_settings_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "ppba-alpaca" / "settings.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Could not read settings file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SettingsValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise SettingsValidationError(f"Settings file {path} must contain a mapping at root")
    return loaded


def build_settings(doc: dict[str, Any], source: Path | str = "<settings>") -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise SettingsValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    values = dict(doc)
    if "device_numbers" in values:
        values["device_numbers"] = tuple(values["device_numbers"])
    return Settings(**values)


def _resolve_path(path: Path | str | None) -> Path | None:
    if path is not None:
        return Path(path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    candidate = default_settings_path()
    if candidate.is_file():
        return candidate
    return None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from ``path``, ``$PPBA_ALPACA_CONFIG`` or the XDG config dir.

    Built-in defaults are used when no file is found through the implicit
    lookup; an explicit path that cannot be read is an error.
    """
    resolved = _resolve_path(path)
    if resolved is None:
        LOGGER.debug("No settings file found, using defaults")
        return Settings()

    settings = build_settings(_read_yaml(resolved), resolved)
    LOGGER.debug("Loaded settings from %s", resolved)
    return settings
