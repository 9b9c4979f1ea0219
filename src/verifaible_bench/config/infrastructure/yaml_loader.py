"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from verifaible_bench.config.domain.config import BenchConfig
from verifaible_bench.config.domain.observer import ConfigObserver
from verifaible_bench.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from verifaible_bench.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

_HIGH_TEMPERATURE = 0.5


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a BenchConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> BenchConfig:
        """
        Load, interpolate, validate, and return a BenchConfig from a YAML file.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if a model references an unknown provider or
                the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        _check_provider_refs(interpolated=interpolated)
        cfg = _build_config(resolved=interpolated)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(
            name=cfg.name,
            version=cfg.version,
            model_names=[model.name for model in cfg.models],
            provider_names=list(cfg.providers),
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc

    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top-level YAML value is not a mapping")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _check_provider_refs(interpolated: dict[str, Any]) -> None:
    """
    Validate that every model names a provider defined under ``providers``.

    Raises:
        ConfigValidationError: listing ALL invalid references before raising
            (not just the first one).
    """
    providers_raw: dict[str, Any] = interpolated.get("providers", {}) or {}
    models_raw: list[Any] = interpolated.get("models", []) or []
    defined_names = set(providers_raw.keys())

    unknown: list[str] = []
    for model in models_raw:
        if not isinstance(model, dict):
            continue
        provider = model.get("provider")
        if provider is not None and provider not in defined_names:
            unknown.append(
                f"model '{model.get('name')}' references unknown provider '{provider}'"
            )

    if unknown:
        raise ConfigValidationError("; ".join(unknown))


def _build_config(resolved: Any) -> BenchConfig:
    try:
        return BenchConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _emit_warnings(cfg: BenchConfig, observer: ConfigObserver) -> None:
    if cfg.session.temperature > _HIGH_TEMPERATURE:
        observer.config_high_temperature_warning(cfg.session.temperature)
