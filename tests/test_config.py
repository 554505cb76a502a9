"""Tests for adapter configuration and settings."""

from __future__ import annotations

import dataclasses

import pytest

from totalum_auth_adapter import (
    AdapterCapabilities,
    TotalumAdapterConfig,
    TotalumSettings,
)


class TestTotalumSettings:
    def test_defaults_when_environment_is_empty(self) -> None:
        settings = TotalumSettings.from_env({})
        assert settings.api_key == "test-api-key"
        assert settings.base_url == "https://api.totalum.app/"
        assert settings.timeout == 30.0

    def test_reads_environment(self) -> None:
        settings = TotalumSettings.from_env(
            {
                "TOTALUM_API_KEY": "live-key",
                "TOTALUM_API_URL": "https://eu.totalum.test/",
                "TOTALUM_TIMEOUT": "5",
            }
        )
        assert settings == TotalumSettings("live-key", "https://eu.totalum.test/", 5.0)

    def test_empty_values_fall_back(self) -> None:
        settings = TotalumSettings.from_env({"TOTALUM_API_KEY": ""})
        assert settings.api_key == "test-api-key"

    def test_process_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("TOTALUM_API_KEY", "from-env")
        monkeypatch.delenv("TOTALUM_API_URL", raising=False)
        monkeypatch.delenv("TOTALUM_TIMEOUT", raising=False)
        assert TotalumSettings.from_env().api_key == "from-env"


class TestAdapterConfig:
    def test_defaults(self) -> None:
        config = TotalumAdapterConfig()
        assert config.debug_logs is False
        assert config.collection_prefix == "data_"
        assert config.default_limit == 50
        assert config.scan_limit == 1000
        assert config.batch_concurrency == 1

    @pytest.mark.parametrize(
        "field", ["default_limit", "scan_limit", "batch_concurrency"]
    )
    def test_rejects_non_positive(self, field) -> None:
        with pytest.raises(ValueError, match=field):
            TotalumAdapterConfig(**{field: 0})

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            TotalumAdapterConfig().debug_logs = True  # type: ignore[misc]


def test_capabilities() -> None:
    caps = AdapterCapabilities()
    assert caps.adapter_id == "totalum"
    assert (caps.supports_json, caps.supports_booleans) == (False, False)
    assert caps.supports_dates is True
    assert caps.disable_id_generation is True
