"""Tests for ${ENV_VAR} interpolation."""

import pytest

from verifaible_bench.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)


class TestCollectMissingVars:
    def test_nested_structures_are_walked(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ALPHA", raising=False)
        monkeypatch.delenv("BETA", raising=False)
        data = {"a": "${ALPHA}", "b": [{"c": "x-${BETA}-y"}, "${ALPHA}"]}

        assert collect_missing_vars(data) == ["ALPHA", "BETA"]

    def test_vars_with_defaults_are_not_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ALPHA", raising=False)

        assert collect_missing_vars({"a": "${ALPHA:-fallback}"}) == []


class TestInterpolate:
    def test_substitutes_in_place(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "example.com")

        assert interpolate({"url": "https://${HOST}/v1", "n": 3}) == {
            "url": "https://example.com/v1",
            "n": 3,
        }

    def test_empty_value_falls_back_to_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "")

        assert interpolate(["${HOST:-localhost}"]) == ["localhost"]
