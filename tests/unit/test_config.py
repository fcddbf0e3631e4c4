"""Tests for configuration schema and layered loading."""

import json
from pathlib import Path

import pytest

from gboxrun.config.loader import apply_env_overrides, load_config, overlay, read_layer
from gboxrun.config.schema import Config
from gboxrun.core.errors import ConfigError


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point Path.home() at an isolated directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home_dir))
    return home_dir


def _write_config(directory: Path, data: dict) -> Path:
    config_dir = directory / ".gboxrun"
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "config.json"
    path.write_text(json.dumps(data))
    return path


class TestConfigSchema:
    """Tests for Config defaults and validation."""

    def test_defaults(self) -> None:
        config = Config()

        assert config.server.host == "localhost"
        assert config.server.port == 8765
        assert config.mcp.server_name == "gbox-android-studio-plugin"
        assert config.mcp.protocol_version == "2024-11-05"
        assert config.backend.api_url == "http://localhost:8765"
        assert config.backend.rerun_grace_period == 1.0
        assert config.backend.simulated_configurations == ["app"]
        assert config.backend.project_path is None

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValueError):
            Config.model_validate({"server": {"bogus": 1}})

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(ValueError):
            Config.model_validate({"server": {"port": port}})

    def test_negative_grace_period_rejected(self) -> None:
        with pytest.raises(ValueError):
            Config.model_validate({"backend": {"rerun_grace_period": -0.5}})


class TestReadLayer:
    """Tests for reading a single config file."""

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert read_layer(tmp_path / "missing.json") is None

    def test_blank_file_is_empty_layer(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("   \n")

        assert read_layer(path) == {}

    def test_bom_tolerated(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_bytes(b"\xef\xbb\xbf{\"server\": {\"port\": 9000}}")

        assert read_layer(path) == {"server": {"port": 9000}}

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("[1]")

        with pytest.raises(ConfigError, match="must be a JSON object, got list"):
            read_layer(path)

    def test_invalid_json_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("{nope")

        with pytest.raises(ConfigError, match="Invalid JSON") as exc_info:
            read_layer(path)

        assert str(path) in exc_info.value.message

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read config"):
            read_layer(tmp_path)


class TestOverlay:
    """Tests for section-wise layering."""

    def test_keys_replace_within_section(self) -> None:
        merged = overlay(
            {"server": {"port": 1, "log_level": "DEBUG"}},
            {"server": {"port": 2}, "backend": {"timeout": 5}},
        )

        assert merged == {
            "server": {"port": 2, "log_level": "DEBUG"},
            "backend": {"timeout": 5},
        }

    def test_lists_replace(self) -> None:
        merged = overlay(
            {"backend": {"simulated_configurations": ["a", "b"]}},
            {"backend": {"simulated_configurations": ["c"]}},
        )

        assert merged["backend"]["simulated_configurations"] == ["c"]

    def test_inputs_not_modified(self) -> None:
        base = {"server": {"port": 1}}
        overlay(base, {"server": {"port": 2}})

        assert base == {"server": {"port": 1}}


class TestLoadConfig:
    """Tests for layered load_config."""

    def test_no_files_gives_defaults(self, home: Path, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path, env={})

        assert config == Config()

    def test_local_layer_overrides_global(self, home: Path, tmp_path: Path) -> None:
        _write_config(home, {"server": {"port": 9000, "log_level": "DEBUG"}})
        project = tmp_path / "project"
        _write_config(project, {"server": {"port": 9100}})

        config = load_config(cwd=project, env={})

        assert config.server.port == 9100
        assert config.server.log_level == "DEBUG"

    def test_lists_replace_across_layers(self, home: Path, tmp_path: Path) -> None:
        _write_config(home, {"backend": {"simulated_configurations": ["a", "b"]}})
        project = tmp_path / "project"
        _write_config(project, {"backend": {"simulated_configurations": ["c"]}})

        config = load_config(cwd=project, env={})

        assert config.backend.simulated_configurations == ["c"]

    def test_explicit_path_skips_layers(self, home: Path, tmp_path: Path) -> None:
        _write_config(home, {"server": {"port": 9000}})
        explicit = tmp_path / "explicit.json"
        explicit.write_text(json.dumps({"backend": {"timeout": 5}}))

        config = load_config(path=explicit, env={})

        assert config.server.port == 8765
        assert config.backend.timeout == 5

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(path=tmp_path / "missing.json", env={})

    def test_invalid_layer_raises_config_error(self, home: Path, tmp_path: Path) -> None:
        (home / ".gboxrun").mkdir()
        (home / ".gboxrun" / "config.json").write_text("{broken")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(cwd=tmp_path, env={})

    def test_validation_failure_names_sources(self, home: Path, tmp_path: Path) -> None:
        path = _write_config(tmp_path, {"server": {"port": "not a port"}})

        with pytest.raises(ConfigError, match="Config validation failed") as exc_info:
            load_config(cwd=tmp_path, env={})

        assert str(path) in exc_info.value.message

    def test_env_overrides_win(self, home: Path, tmp_path: Path) -> None:
        _write_config(tmp_path, {"server": {"port": 9100}})

        config = load_config(
            cwd=tmp_path,
            env={"GBOXRUN_PORT": "9200", "GBOXRUN_API_URL": "http://127.0.0.1:9200"},
        )

        assert config.server.port == 9200
        assert config.backend.api_url == "http://127.0.0.1:9200"


class TestApplyEnvOverrides:
    """Tests for apply_env_overrides."""

    def test_no_env_returns_data_unchanged(self) -> None:
        data = {"server": {"port": 1}}

        assert apply_env_overrides(data, {}) is data

    def test_bad_port_raises(self) -> None:
        with pytest.raises(ConfigError, match="GBOXRUN_PORT must be an integer"):
            apply_env_overrides({}, {"GBOXRUN_PORT": "eighty"})

    def test_empty_values_ignored(self) -> None:
        assert apply_env_overrides({}, {"GBOXRUN_PORT": "", "GBOXRUN_API_URL": ""}) == {}
