"""
Tests for the configuration module.
"""

import pytest

from op_env.config import BackendConfig, ConfigurationError, OpEnvConfig
from op_env.render import OutputFormat


class TestBackendConfig:
    """Tests for the BackendConfig dataclass."""

    def test_default_values(self):
        """Test default values."""
        config = BackendConfig()

        assert config.type == "1password"
        assert config.options == {}


class TestOpEnvConfig:
    """Tests for the OpEnvConfig class."""

    def test_empty_config(self):
        """Test the built-in defaults."""
        config = OpEnvConfig()

        assert config.vault == "dev"
        assert config.item == "main"
        assert config.format is OutputFormat.DOTENV
        assert config.backend == BackendConfig()

    def test_load_nonexistent_file(self):
        """Test loading a nonexistent file returns the defaults."""
        config = OpEnvConfig.load("/nonexistent/path/config.yaml")

        assert config == OpEnvConfig()

    def test_load_valid_config(self, temp_dir):
        """Test loading a valid configuration file."""
        config_content = """
vault: prod
item: api
format: shell
backend:
  type: 1password
  config:
    executable: /usr/local/bin/op
"""
        config_path = temp_dir / ".op-env.yaml"
        config_path.write_text(config_content)

        config = OpEnvConfig.load(str(config_path))

        assert config.vault == "prod"
        assert config.item == "api"
        assert config.format is OutputFormat.SHELL
        assert config.backend.type == "1password"
        assert config.backend.options == {"executable": "/usr/local/bin/op"}

    def test_partial_config_keeps_defaults(self, temp_dir):
        """Test that missing keys fall back to the defaults."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("item: web\n")

        config = OpEnvConfig.load(config_path)

        assert config.vault == "dev"
        assert config.item == "web"
        assert config.format is OutputFormat.DOTENV

    def test_blank_values_keep_defaults(self, temp_dir):
        """Test that keys left empty in YAML fall back to the defaults."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("vault:\nitem: web\nformat:\nbackend:\n  type:\n")

        config = OpEnvConfig.load(config_path)

        assert config.vault == "dev"
        assert config.item == "web"
        assert config.format is OutputFormat.DOTENV
        assert config.backend.type == "1password"

    def test_find_config_in_cwd(self, temp_dir, monkeypatch):
        """Test that a config file in the working directory is found."""
        (temp_dir / ".op-env.yaml").write_text("vault: found\n")
        monkeypatch.chdir(temp_dir)

        assert OpEnvConfig.load().vault == "found"

    def test_load_invalid_yaml(self, temp_dir):
        """Test that invalid YAML raises an error."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text("invalid: yaml: content: [[[")

        with pytest.raises(ConfigurationError):
            OpEnvConfig.load(str(config_path))

    def test_load_empty_yaml(self, temp_dir):
        """Test loading an empty YAML file."""
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")

        assert OpEnvConfig.load(str(config_path)) == OpEnvConfig()

    def test_load_non_mapping(self, temp_dir):
        """Test that a YAML list is rejected."""
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- dev\n- main\n")

        with pytest.raises(ConfigurationError):
            OpEnvConfig.load(config_path)

    def test_load_unknown_format(self, temp_dir):
        """Test that an unknown format is rejected."""
        config_path = temp_dir / "format.yaml"
        config_path.write_text("format: yaml\n")

        with pytest.raises(ConfigurationError) as exc_info:
            OpEnvConfig.load(config_path)

        assert "yaml" in str(exc_info.value)

    def test_load_invalid_backend(self, temp_dir):
        """Test that a scalar backend section is rejected."""
        config_path = temp_dir / "backend.yaml"
        config_path.write_text("backend: 1password\n")

        with pytest.raises(ConfigurationError):
            OpEnvConfig.load(config_path)


class TestConfigurationError:
    """Tests for the ConfigurationError exception."""

    def test_error_message(self):
        """Test error message."""
        error = ConfigurationError("Invalid YAML")

        assert str(error) == "Invalid YAML"

    def test_error_with_cause(self, temp_dir):
        """Test that a YAML error is chained as the cause."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text("invalid: yaml: content: [[[")

        with pytest.raises(ConfigurationError) as exc_info:
            OpEnvConfig.load(config_path)

        assert exc_info.value.__cause__ is not None
