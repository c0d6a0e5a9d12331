from __future__ import annotations

from dataclasses import asdict, fields, replace
from typing import Any, Mapping

from gapto10.core.models import Config, RoundingType

DEFAULT_CONFIG = Config()

# stored/exported key -> Config attribute
CONFIG_KEYS: dict[str, str] = {
    "defaultMaxPoints": "default_max_points",
    "percentagePerPoint": "percentage_per_point",
    "passingPercentage": "passing_percentage",
    "roundingType": "rounding_type",
    "showJsonInExportImport": "show_json_in_export_import",
}


class ConfigError(ValueError):
    pass


def normalize_config(config: Mapping[str, Any] | Config | None) -> Config:
    """Fill missing or null keys with their defaults.

    Accepts a ``Config`` or a mapping with the stored camelCase keys, so
    configs saved before a key existed still load.
    """
    if config is None:
        return DEFAULT_CONFIG
    if isinstance(config, Config):
        return config
    values: dict[str, Any] = {}
    for key, attr in CONFIG_KEYS.items():
        value = config.get(key)
        if value is not None:
            values[attr] = value
    if "rounding_type" in values:
        try:
            values["rounding_type"] = RoundingType(values["rounding_type"])
        except ValueError as exc:
            raise ConfigError(f"Unsupported roundingType: {values['rounding_type']}") from exc
    return replace(DEFAULT_CONFIG, **values)


def config_to_dict(config: Config) -> dict[str, Any]:
    data = asdict(config)
    data["rounding_type"] = config.rounding_type.value
    return {key: data[attr] for key, attr in CONFIG_KEYS.items()}


def minimize_config(config: Mapping[str, Any] | Config | None) -> dict[str, Any] | None:
    """Only the keys that differ from the defaults, or None if there are none."""
    if config is None:
        return None
    current = config_to_dict(normalize_config(config))
    defaults = config_to_dict(DEFAULT_CONFIG)
    minimized = {key: value for key, value in current.items() if value != defaults[key]}
    return minimized or None


def configs_are_equal(first: Mapping[str, Any] | Config | None, second: Mapping[str, Any] | Config | None) -> bool:
    a = normalize_config(first)
    b = normalize_config(second)
    return all(getattr(a, f.name) == getattr(b, f.name) for f in fields(Config))


def validate_config(config: Config) -> Config:
    if config.default_max_points <= 0:
        raise ConfigError("defaultMaxPoints must be greater than 0")
    if config.percentage_per_point <= 0:
        raise ConfigError("percentagePerPoint must be greater than 0")
    if not 0 < config.passing_percentage <= 100:
        raise ConfigError("passingPercentage must be in (0, 100]")
    return config
