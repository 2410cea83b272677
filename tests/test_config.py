"""Tests for configuration loading."""

from pathlib import Path

import pytest

from promptbot.config import Config, get_config, reload_config
from promptbot.config import defaults


class TestConfig:
    def test_defaults(self, tmp_path):
        config = Config(tmp_path / "config.py")
        assert config.source is None
        for key in defaults.CONFIG_KEYS:
            assert getattr(config, key) == getattr(defaults, key)
        assert config.validate() == []

    def test_user_config_overrides(self, tmp_path):
        config_path = tmp_path / "config.py"
        config_path.write_text(
            'STORAGE_BACKEND = "memory"\nDATA_DIR = "elsewhere"\nUNRELATED = 1\n'
        )
        config = Config(config_path)
        assert config.source == config_path
        assert config.STORAGE_BACKEND == "memory"
        assert config.DATA_DIR == "elsewhere"
        assert not hasattr(config, "UNRELATED")

    def test_finds_config_in_parent(self, tmp_path, monkeypatch):
        (tmp_path / "config.py").write_text('USER_ID = "found"\n')
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)

        assert Config().USER_ID == "found"

    def test_state_db_path(self, tmp_path):
        config = Config(tmp_path / "config.py")
        config.DATA_DIR = "var"
        assert config.state_db_path == Path("var") / "state.db"

    def test_get(self, tmp_path):
        config = Config(tmp_path / "config.py")
        assert config.get("LOG_LEVEL") == "INFO"
        assert config.get("MISSING", 5) == 5

    @pytest.mark.parametrize("key,value,message", [
        ("STORAGE_BACKEND", "redis", "STORAGE_BACKEND"),
        ("LOG_LEVEL", "LOUD", "LOG_LEVEL"),
        ("STATE_DB", "", "STATE_DB"),
        ("USER_ID", "", "USER_ID"),
    ])
    def test_validate(self, tmp_path, key, value, message):
        config = Config(tmp_path / "config.py")
        setattr(config, key, value)
        errors = config.validate()
        assert len(errors) == 1
        assert message in errors[0]

    def test_reload_replaces_global(self, tmp_path):
        config_path = tmp_path / "config.py"
        config_path.write_text('LOG_LEVEL = "DEBUG"\n')

        config = reload_config(config_path)
        assert get_config() is config
        assert config.LOG_LEVEL == "DEBUG"
        reload_config(tmp_path / "missing.py")
