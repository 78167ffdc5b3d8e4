"""Tests for environment-driven configuration."""

from combinedata._config import get_default_name
from combinedata._constants import DEFAULT_COMBINED_NAME, DEFAULT_NAME_ENV_VAR


class TestGetDefaultName:

    def test_falls_back_to_constant(self, monkeypatch):
        monkeypatch.delenv(DEFAULT_NAME_ENV_VAR, raising=False)
        assert get_default_name() == DEFAULT_COMBINED_NAME

    def test_env_var_overrides(self, monkeypatch):
        monkeypatch.setenv(DEFAULT_NAME_ENV_VAR, "  Merged  ")
        assert get_default_name() == "Merged"

    def test_blank_env_var_ignored(self, monkeypatch):
        monkeypatch.setenv(DEFAULT_NAME_ENV_VAR, "   ")
        assert get_default_name() == DEFAULT_COMBINED_NAME
