"""Tests for config domain models."""

import pytest
from pydantic import ValidationError

from verifaible_bench.config.domain.config import BenchConfig
from verifaible_bench.config.domain.provider import RetryConfig
from verifaible_bench.config.domain.session import SessionConfig


def _config_data(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "name": "bench",
        "version": "1",
        "dataset": {"path": "testset.json"},
        "providers": {
            "openrouter": {
                "type": "responses",
                "base_url": "https://openrouter.ai/api/v1",
                "api_key": "sk-test",
            }
        },
        "models": [{"name": "openai/gpt-4.1", "provider": "openrouter"}],
    }
    data.update(overrides)
    return data


class TestDefaults:
    def test_session_defaults(self) -> None:
        session = SessionConfig()

        assert session.max_rounds == 30
        assert session.temperature == 0.3
        assert session.tool_result_max_chars == 12000
        assert "[@v:ID]" in session.system_prompt
        assert session.tools is None

    def test_retry_defaults(self) -> None:
        retry = RetryConfig()

        assert retry.max_attempts == 5
        assert retry.initial_backoff_seconds == 15.0
        assert retry.backoff_multiplier == 2.0
        assert retry.max_backoff_seconds == 120.0

    def test_minimal_config_fills_sections(self) -> None:
        cfg = BenchConfig.model_validate(_config_data())

        assert cfg.execution.max_concurrent == 1
        assert cfg.tools.api_base == "https://ai.verifaible.space/api/v1"


class TestValidation:
    def test_duplicate_model_names_rejected(self) -> None:
        models = [
            {"name": "m", "provider": "openrouter"},
            {"name": "m", "provider": "openrouter"},
        ]
        with pytest.raises(ValidationError, match="duplicate model name"):
            BenchConfig.model_validate(_config_data(models=models))

    def test_unknown_provider_type_rejected(self) -> None:
        providers = {"x": {"type": "grpc", "base_url": "http://x", "api_key": "k"}}
        with pytest.raises(ValidationError):
            BenchConfig.model_validate(_config_data(providers=providers))

    def test_zero_max_rounds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(max_rounds=0)

    def test_known_tool_subset_accepted(self) -> None:
        session = SessionConfig(tools=["web_fetch", "verifaible_cite"])

        assert session.tools == ["web_fetch", "verifaible_cite"]

    def test_unknown_tool_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unknown tool"):
            SessionConfig(tools=["rm_rf"])

    def test_config_is_frozen(self) -> None:
        cfg = BenchConfig.model_validate(_config_data())
        with pytest.raises(ValidationError):
            cfg.name = "other"  # type: ignore[misc]
