"""Tests for access setter configuration loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from access_setter.engine import (
    AccessSetterConfig,
    AccessSetterConfigLoader,
    DialectConfig,
    Scope,
)


def write_config(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestAccessSetterConfig:
    """Tests for the configuration model."""

    def test_defaults(self) -> None:
        config = AccessSetterConfig()
        assert config.active_scope == Scope.RUNTIME
        assert config.force_silent is False
        assert config.dialects == []
        assert set(config.build_dialects()) == {"std", "starrian"}

    def test_scope_from_string(self) -> None:
        assert AccessSetterConfig(active_scope="build").active_scope == Scope.BUILD

    @pytest.mark.parametrize("scope", ["all", "dialect"])
    def test_inactive_scopes_rejected(self, scope: str) -> None:
        with pytest.raises(ValidationError, match="active_scope must be"):
            AccessSetterConfig(active_scope=scope)

    def test_unknown_scope_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AccessSetterConfig(active_scope="sometimes")

    def test_custom_dialects(self) -> None:
        config = AccessSetterConfig(
            dialects=[DialectConfig(name="galimulator", extra_scopes=["client", "server"])]
        )
        dialects = config.build_dialects()
        assert dialects["galimulator"].extra_scopes == frozenset({"client", "server"})
        assert "std" in dialects

    @pytest.mark.parametrize("scope", ["cl1ent", "runtime", "b"])
    def test_invalid_dialect_scope(self, scope: str) -> None:
        with pytest.raises(ValidationError):
            DialectConfig(name="custom", extra_scopes=[scope])


class TestAccessSetterConfigLoader:
    """Tests for the config file and environment lookup."""

    def test_no_config_uses_defaults(self) -> None:
        loader = AccessSetterConfigLoader()
        assert loader.get_config_path() is None
        assert loader.load_config() == AccessSetterConfig()

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path / "ras.yml",
            {
                "active_scope": "build",
                "force_silent": True,
                "extra_versions": ["v2"],
                "dialects": [{"name": "galimulator", "extra_scopes": ["client"]}],
            },
        )

        config = AccessSetterConfigLoader(path).load_config()

        assert config.active_scope == Scope.BUILD
        assert config.force_silent is True
        assert config.extra_versions == ["v2"]
        assert config.dialects[0].name == "galimulator"

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        loader = AccessSetterConfigLoader(tmp_path / "missing.yml")
        assert loader.get_config_path() is None
        assert loader.load_config() == AccessSetterConfig()

    def test_env_var_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_config(tmp_path / "env.yml", {"active_scope": "build"})
        monkeypatch.setenv("RAS_CONFIG", str(path))

        loader = AccessSetterConfigLoader()

        assert loader.get_config_path() == path
        assert loader.load_config().active_scope == Scope.BUILD

    def test_standard_location(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "home" / ".ras" / "config.yml", {"force_silent": True})

        loader = AccessSetterConfigLoader()

        assert loader.get_config_path() == path
        assert loader.load_config().force_silent is True

    def test_environment_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_config(
            tmp_path / "ras.yml", {"active_scope": "runtime", "force_silent": False}
        )
        monkeypatch.setenv("RAS_ACTIVE_SCOPE", " BUILD ")
        monkeypatch.setenv("RAS_FORCE_SILENT", "yes")

        config = AccessSetterConfigLoader(path).load_config()

        assert config.active_scope == Scope.BUILD
        assert config.force_silent is True

    def test_invalid_force_silent_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAS_FORCE_SILENT", "maybe")
        with pytest.raises(ValueError, match="RAS_FORCE_SILENT must be a boolean"):
            AccessSetterConfigLoader().load_config()

    def test_invalid_scope_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAS_ACTIVE_SCOPE", "all")
        with pytest.raises(ValueError, match="Invalid access setter configuration"):
            AccessSetterConfigLoader().load_config()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yml"
        path.write_text("active_scope: [build\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Failed to load access setter config"):
            AccessSetterConfigLoader(path).load_config()

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "list.yml", ["build"])
        with pytest.raises(ValueError, match="YAML dictionary"):
            AccessSetterConfigLoader(path).load_config()

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert AccessSetterConfigLoader(path).load_config() == AccessSetterConfig()

    def test_config_is_cached(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "ras.yml", {"active_scope": "build"})
        loader = AccessSetterConfigLoader(path)

        first = loader.load_config()
        write_config(path, {"active_scope": "runtime"})

        assert loader.load_config() is first

    def test_json_schema(self) -> None:
        schema = AccessSetterConfig.model_json_schema()
        assert set(schema["properties"]) == {
            "active_scope",
            "force_silent",
            "dialects",
            "extra_versions",
        }
