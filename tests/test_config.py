"""Tests for Config and configuration loading"""
import json

import pytest

from tak.config import Config, camelize, detect_app_name, load_config
from tak.exceptions import ConfigError


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_names(self):
        assert Config().names == ["armstrong", "hickey", "mccarthy", "lovelace", "kay", "valim"]

    def test_default_base_port(self):
        assert Config().base_port == 4000

    def test_default_trees_dir(self):
        assert Config().trees_dir == "trees"

    def test_create_database_true_by_default(self):
        assert Config().create_database is True

    def test_defaults_are_not_shared(self):
        """Each Config gets its own names list."""
        first = Config()
        first.names.append("extra")
        assert "extra" not in Config().names


class TestConfigValidation:
    """Test configuration validation."""

    def test_empty_names(self):
        with pytest.raises(ConfigError, match="non-empty list"):
            Config(names=[])

    def test_duplicate_names(self):
        with pytest.raises(ConfigError, match="unique"):
            Config(names=["a", "a"])

    def test_name_with_slash(self):
        with pytest.raises(ConfigError, match="not a valid directory name"):
            Config(names=["feature/x"])

    def test_base_port_out_of_range(self):
        with pytest.raises(ConfigError, match="outside 1-65535"):
            Config(base_port=65530)

    def test_base_port_must_be_int(self):
        with pytest.raises(ConfigError, match="integer"):
            Config(base_port="4000")

    def test_empty_trees_dir(self):
        with pytest.raises(ConfigError, match="trees_dir"):
            Config(trees_dir="  ")

    def test_create_database_must_be_bool(self):
        with pytest.raises(ConfigError, match="create_database"):
            Config(create_database="no")


class TestConfigConversion:
    """Test dictionary conversion."""

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"base_port": 5000, "retries": 3})
        assert config.base_port == 5000
        assert config.get("retries") is None

    def test_to_dict_round_trip(self):
        config = Config(names=["a", "b"], base_port=5000, app_name="shop")
        assert Config.from_dict(config.to_dict()) == config


class TestModuleName:
    """Test module name derivation."""

    def test_simple_app(self):
        assert Config(app_name="tak").module_name == "Tak"

    def test_underscored_app(self):
        assert camelize("my_app") == "MyApp"


class TestDetectAppName:
    """Test app name detection."""

    def test_from_mix_exs(self, temp_dir):
        (temp_dir / "mix.exs").write_text("def project do\n  [\n    app: :shop_front,\n  ]\nend\n")
        assert detect_app_name(str(temp_dir)) == "shop_front"

    def test_falls_back_to_directory_name(self, temp_dir):
        project = temp_dir / "my-project"
        project.mkdir()
        assert detect_app_name(str(project)) == "my_project"


class TestLoadConfig:
    """Test loading tak.json."""

    def test_without_config_file(self, repo_path):
        config = load_config(repo_path)
        assert config.names == Config().names
        assert config.app_name == "myapp"

    def test_reads_config_file(self, temp_dir):
        (temp_dir / "tak.json").write_text(
            json.dumps({"names": ["a", "b", "c"], "base_port": 5000, "create_database": False})
        )
        config = load_config(str(temp_dir))
        assert config.names == ["a", "b", "c"]
        assert config.base_port == 5000
        assert config.create_database is False

    def test_overrides_take_precedence(self, temp_dir):
        (temp_dir / "tak.json").write_text(json.dumps({"trees_dir": "wt"}))
        config = load_config(str(temp_dir), {"trees_dir": "other", "verbose": None})
        assert config.trees_dir == "other"
        assert config.verbose is False

    def test_invalid_json(self, temp_dir):
        (temp_dir / "tak.json").write_text("{not json")
        with pytest.raises(ConfigError, match="tak.json"):
            load_config(str(temp_dir))

    def test_non_object_json(self, temp_dir):
        (temp_dir / "tak.json").write_text("[1, 2]")
        with pytest.raises(ConfigError, match="top level"):
            load_config(str(temp_dir))

    def test_explicit_app_name_wins(self, repo_path, temp_dir):
        (temp_dir / "myapp" / "tak.json").write_text(json.dumps({"app_name": "other"}))
        assert load_config(repo_path).app_name == "other"
