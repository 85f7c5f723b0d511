# tests/unit/config/test_settings.py - v1
"""Tests for config/settings.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from cdnrewrite.config.settings import ConfigurationError, Settings, load_settings


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.product == "default"
        assert s.cache_backend == "json"
        assert s.cache_enabled is True
        assert s.template_extensions_list == ["html", "htm", "tpl", "vm"]
        assert s.cache_root == Path("~/.cdnrewrite/cache")

    def test_cache_namespace(self):
        assert Settings(_env_file=None, product="shop").cache_namespace == "shop/cdn"
        assert Settings(_env_file=None, product="").cache_namespace == "default/cdn"

    def test_template_extensions_normalized(self):
        s = Settings(_env_file=None, template_extensions=" .HTML, tpl,,.Vm ")
        assert s.template_extensions_list == ["html", "tpl", "vm"]

    def test_redis_requires_url(self):
        with pytest.raises(ConfigurationError, match="CACHE_REDIS_URL"):
            Settings(_env_file=None, cache_backend="redis")

    def test_redis_with_url(self):
        s = Settings(
            _env_file=None, cache_backend="redis", cache_redis_url="redis://localhost:6379/0"
        )
        assert s.cache_backend == "redis"

    def test_negative_retention_rejected(self):
        with pytest.raises(ConfigurationError, match="LOG_RETENTION"):
            Settings(_env_file=None, log_retention=-1)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PRODUCT", "blog")
        monkeypatch.setenv("CACHE_BACKEND", "sqlite")
        s = Settings(_env_file=None)
        assert s.product == "blog"
        assert s.cache_backend == "sqlite"

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, cache_enabled=False)
        assert s.cache_enabled is False
