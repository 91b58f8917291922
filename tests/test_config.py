from pathlib import Path

import tomllib

import config
from config import Config, _parse_config


class TestParseConfig:
    """Tests for reading configuration values."""

    def test_empty_file_uses_defaults(self):
        """Test that every setting has a default."""
        parsed = _parse_config({})
        defaults = Config.default()

        assert parsed == defaults
        assert parsed.llm_enabled is False
        assert parsed.default_user == "default"

    def test_all_sections(self, tmp_path):
        """Test reading every section."""
        parsed = _parse_config(
            {
                "base_dir": str(tmp_path),
                "database": {"filename": "money.db"},
                "logging": {"level": "DEBUG"},
                "llm": {
                    "enabled": True,
                    "provider": "openai",
                    "api_key": "sk-test",
                    "model": "llama-3.3-70b-versatile",
                    "base_url": "https://api.groq.com/openai/v1",
                    "timeout": 5,
                },
                "categorization": {"default_user": "alice"},
            }
        )

        assert parsed.db_path == tmp_path / "db" / "money.db"
        assert parsed.log_dir == tmp_path / "logs"
        assert parsed.log_level == "DEBUG"
        assert parsed.llm_enabled is True
        assert parsed.llm_openai_api_key == "sk-test"
        assert parsed.llm_openai_model == "llama-3.3-70b-versatile"
        assert parsed.llm_base_url == "https://api.groq.com/openai/v1"
        assert parsed.llm_timeout == 5.0
        assert parsed.default_user == "alice"

    def test_empty_strings_mean_unset(self):
        """Test that blank optional values are read as None."""
        parsed = _parse_config({"llm": {"provider": "", "model": "", "base_url": ""}})

        assert parsed.llm_provider is None
        assert parsed.llm_openai_model is None
        assert parsed.llm_base_url is None


class TestLoadConfig:
    """Tests for loading and creating the config file."""

    def test_creates_default_file(self, tmp_path, monkeypatch):
        """Test that a missing config file is written with defaults."""
        config_path = tmp_path / ".config" / "spendwise.toml"
        monkeypatch.setattr(config, "get_config_path", lambda: config_path)

        loaded = config.load_config()

        assert config_path.exists()
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        assert data["llm"]["enabled"] is False
        assert data["llm"]["model"] == ""
        assert data["categorization"]["default_user"] == "default"
        assert loaded == Config.default()

    def test_written_file_reads_back(self, tmp_path, monkeypatch):
        """Test that a written config loads to the same values."""
        config_path = tmp_path / "spendwise.toml"
        monkeypatch.setattr(config, "get_config_path", lambda: config_path)
        original = Config(
            base_dir=tmp_path,
            db_data_dir=tmp_path / "data",
            db_filename="test.db",
            log_level="WARNING",
            log_dir=tmp_path / "logs",
            llm_enabled=True,
            llm_openai_api_key="sk-test",
            default_user="alice",
        )

        config._write_config(original)

        assert config.load_config() == original

    def test_resource_dirs_exist(self):
        """Test that migrations and seed data ship with the code."""
        assert isinstance(config.get_migrations_dir(), Path)
        assert config.get_migrations_dir().is_dir()
        assert (config.get_seed_dir() / "categories.json").is_file()
