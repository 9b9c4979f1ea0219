"""StructlogConfigObserver — logs config loading events."""

import structlog

_REPRODUCIBLE_TEMPERATURE = 0.5


class StructlogConfigObserver:
    """Does NOT inherit from ConfigObserver (structural typing via Protocol)."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(
        self, name: str, version: str, model_names: list[str], provider_names: list[str]
    ) -> None:
        self._log.info(
            "config.loaded",
            name=name,
            version=version,
            models=model_names,
            providers=provider_names,
        )

    def config_high_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.high_temperature_warning",
            temperature=temperature,
            threshold=_REPRODUCIBLE_TEMPERATURE,
        )
