"""Tests for ConfigService."""

import yaml

from src.models.config import AppConfig
from src.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)


class TestConfigServiceLoad:
    """Tests for loading configuration."""

    def test_load_defaults_when_no_file(self, temp_dir):
        """Returns default config when file doesn't exist."""
        config = ConfigService(temp_dir / "nonexistent.yaml").load()

        assert config.port == 5050
        assert config.log_store.backend == "memory"
        assert config.log_store.capacity == 1000

    def test_load_from_yaml(self, temp_dir):
        """Loads config from YAML file."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text(
            """
port: 8080
log_store:
  backend: file
  capacity: 500
  file_path: /tmp/james/logs.json
events:
  buffer_size: 20
"""
        )

        config = ConfigService(config_file).load()

        assert config.port == 8080
        assert config.log_store.backend == "file"
        assert config.log_store.capacity == 500
        assert config.log_store.file_path == "/tmp/james/logs.json"
        assert config.events.buffer_size == 20

    def test_load_handles_invalid_yaml(self, temp_dir):
        """Returns defaults for invalid YAML."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        config = ConfigService(config_file).load()

        assert config.port == 5050

    def test_load_handles_non_mapping(self, temp_dir):
        """Returns defaults when the YAML is not a mapping."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        assert ConfigService(config_file).load().model_dump() == AppConfig().model_dump()

    def test_load_handles_validation_error(self, temp_dir):
        """Returns defaults for invalid config values."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("log_store:\n  backend: redis\n")

        config = ConfigService(config_file).load()

        assert config.log_store.backend == "memory"


class TestEnvironmentOverrides:
    """Tests for environment variable overrides."""

    def test_port_override(self, temp_dir, monkeypatch):
        """PORT overrides the file's port."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("port: 8080\n")
        monkeypatch.setenv("PORT", "9090")

        assert ConfigService(config_file).load().port == 9090

    def test_nested_override_keeps_other_keys(self, temp_dir, monkeypatch):
        """Section overrides merge into the file's section."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("log_store:\n  capacity: 50\n")
        monkeypatch.setenv("LOG_STORE_BACKEND", "file")

        config = ConfigService(config_file).load()

        assert config.log_store.backend == "file"
        assert config.log_store.capacity == 50

    def test_overrides_disabled(self, temp_dir, monkeypatch):
        """use_env=False ignores the environment."""
        monkeypatch.setenv("PORT", "9090")
        config = ConfigService(temp_dir / "none.yaml", use_env=False).load()
        assert config.port == 5050


class TestConfigServiceCaching:
    """Tests for caching and reload."""

    def test_get_config_caches(self, temp_dir):
        """get_config loads once."""
        service = ConfigService(temp_dir / "config.yaml")
        assert service.get_config() is service.get_config()

    def test_reload_picks_up_changes(self, temp_dir):
        """reload re-reads the file."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("port: 8080\n")
        service = ConfigService(config_file)
        service.get_config()

        config_file.write_text("port: 8081\n")

        assert service.reload().port == 8081


class TestConfigServiceSave:
    """Tests for saving configuration."""

    def test_save_round_trip(self, temp_dir):
        """Saved config loads back identically."""
        config_file = temp_dir / "config.yaml"
        service = ConfigService(config_file)
        config = AppConfig(port=6060)

        assert service.save(config) is True

        saved = yaml.safe_load(config_file.read_text())
        assert saved["port"] == 6060
        assert ConfigService(config_file).load().model_dump() == config.model_dump()

    def test_save_without_config(self, temp_dir):
        """Nothing to save returns False."""
        assert ConfigService(temp_dir / "config.yaml").save() is False


class TestConfigServiceSingleton:
    """Tests for the module-level accessor."""

    def test_singleton(self, temp_dir):
        """get_config_service returns the same instance until reset."""
        service = get_config_service(temp_dir / "config.yaml")
        assert get_config_service() is service

        reset_config_service()
        assert get_config_service(temp_dir / "other.yaml") is not service
