"""Observer port for config loading events."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(
        self, name: str, version: str, model_names: list[str], provider_names: list[str]
    ) -> None: ...

    def config_high_temperature_warning(self, temperature: float) -> None: ...
