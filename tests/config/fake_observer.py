"""FakeConfigObserver — records config events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfigLoadedEvent:
    name: str
    version: str
    model_names: list[str]
    provider_names: list[str]


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[ConfigLoadedEvent] = []
        self.temperature_warnings: list[float] = []

    def config_loaded(
        self, name: str, version: str, model_names: list[str], provider_names: list[str]
    ) -> None:
        self.loaded.append(
            ConfigLoadedEvent(
                name=name, version=version, model_names=model_names, provider_names=provider_names
            )
        )

    def config_high_temperature_warning(self, temperature: float) -> None:
        self.temperature_warnings.append(temperature)
