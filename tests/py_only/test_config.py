"""Tests for configuration models and workspace config loading."""

import json
from pathlib import Path

import pytest

from coffeesense.config import (
    CoffeeSenseConfig,
    CoffeeSenseFullConfig,
    CoffeeSenseProject,
    ProjectDeclaration,
    find_workspace_config_file,
    get_default_lsp_config,
    load_workspace_config,
)
from coffeesense.errors import ConfigFileError, InvalidDeclarationError


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_default_lsp_config_values() -> None:
    config = get_default_lsp_config()
    assert config.coffeesense.ignore_project_warning is False
    assert config.coffeesense.use_workspace_dependencies is False
    assert config.coffeesense.validation.script is True
    assert config.coffeesense.completion.auto_import is False
    assert config.coffeesense.language_features.code_actions is True
    assert config.coffeesense.trace.server == "off"
    assert config.coffeesense.dev.lsp_port == -1
    assert config.coffeesense.dev.log_level == "INFO"
    assert config.typescript.tsdk is None


def test_default_lsp_config_dumps_editor_keys() -> None:
    data = get_default_lsp_config().model_dump(by_alias=True)
    assert data["coffeesense"]["languageFeatures"]["updateImportOnFileMove"] is True
    assert data["coffeesense"]["dev"]["lspPath"] == ""


def test_settings_accept_primitive_values() -> None:
    config = CoffeeSenseConfig.from_raw({"settings": {"a": True, "b": 3, "c": 1.5, "d": "x"}})
    assert config.settings == {"a": True, "b": 3, "c": 1.5, "d": "x"}
    assert config.settings["a"] is True
    assert isinstance(config.settings["b"], int)


@pytest.mark.parametrize("value", [[1], {"nested": 1}, None])
def test_settings_reject_non_primitive_values(value) -> None:
    with pytest.raises(InvalidDeclarationError):
        CoffeeSenseConfig.from_raw({"settings": {"a": value}})


def test_projects_accept_strings_and_records() -> None:
    config = CoffeeSenseConfig.from_raw({"projects": ["a", {"root": "b", "tsconfig": "ts.json"}]})
    assert config.projects[0] == "a"
    assert config.projects[1] == ProjectDeclaration(root="b", tsconfig="ts.json")


def test_project_record_rejects_non_string_root() -> None:
    with pytest.raises(InvalidDeclarationError):
        CoffeeSenseConfig.from_raw({"projects": [{"root": 3}]})


def test_full_config_to_dict_omits_unset_fields() -> None:
    full = CoffeeSenseFullConfig(
        settings={"k": 1},
        projects=[CoffeeSenseProject(root="/ws/a", tsconfig="/ws/a/tsconfig.json"), CoffeeSenseProject(root="/ws")],
    )
    assert full.to_dict() == {
        "settings": {"k": 1},
        "projects": [{"root": "/ws/a", "tsconfig": "/ws/a/tsconfig.json"}, {"root": "/ws"}],
    }


def test_load_workspace_config_without_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("coffeesense.config.find_workspace_config_file", lambda workspace: None)
    base_dir, config = load_workspace_config(tmp_path)
    assert base_dir == str(tmp_path)
    assert config == CoffeeSenseConfig()


def test_load_workspace_config_yaml(tmp_path) -> None:
    _write(
        tmp_path / "coffeesense.config.yaml",
        "settings:\n  coffeesense.validation.script: false\nprojects:\n  - ./app\n  - root: ./lib\n    package: ../package.json\n",
    )
    base_dir, config = load_workspace_config(tmp_path)
    assert base_dir == str(tmp_path)
    assert config.settings == {"coffeesense.validation.script": False}
    assert config.projects == ["./app", ProjectDeclaration(root="./lib", package="../package.json")]


def test_load_workspace_config_from_ancestor(tmp_path) -> None:
    _write(tmp_path / "coffeesense.config.json", json.dumps({"projects": ["sub"]}))
    workspace = tmp_path / "sub"
    workspace.mkdir()
    base_dir, config = load_workspace_config(workspace)
    assert base_dir == str(tmp_path)
    assert config.projects == ["sub"]


def test_nearest_config_file_wins_across_formats(tmp_path) -> None:
    _write(tmp_path / "coffeesense.config.yaml", "projects: []\n")
    nearer = _write(tmp_path / "ws" / "coffeesense.config.json", "{}")
    assert find_workspace_config_file(tmp_path / "ws") == str(nearer)


def test_yaml_preferred_over_json_in_same_directory(tmp_path) -> None:
    yaml_file = _write(tmp_path / "coffeesense.config.yaml", "{}\n")
    _write(tmp_path / "coffeesense.config.json", "{}")
    assert find_workspace_config_file(tmp_path) == str(yaml_file)


def test_env_variable_selects_config_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "settings" / "custom.yml", "projects: [app]\n")
    monkeypatch.setenv("COFFEESENSE_CONFIG", "settings/custom.yml")
    base_dir, config = load_workspace_config(tmp_path)
    assert base_dir == str(tmp_path / "settings")
    assert config.projects == ["app"]


def test_explicit_config_path(tmp_path) -> None:
    path = _write(tmp_path / "elsewhere" / "cs.json", json.dumps({"settings": {"x": "y"}}))
    base_dir, config = load_workspace_config(tmp_path / "ws", path)
    assert base_dir == str(tmp_path / "elsewhere")
    assert config.settings == {"x": "y"}


def test_empty_yaml_file_is_empty_config(tmp_path) -> None:
    path = _write(tmp_path / "coffeesense.config.yaml", "")
    _, config = load_workspace_config(tmp_path, path)
    assert config == CoffeeSenseConfig()


def test_malformed_yaml_raises_config_file_error(tmp_path) -> None:
    path = _write(tmp_path / "coffeesense.config.yaml", "projects: [unclosed\n")
    with pytest.raises(ConfigFileError) as excinfo:
        load_workspace_config(tmp_path, path)
    assert excinfo.value.path == str(path)


def test_malformed_json_raises_config_file_error(tmp_path) -> None:
    path = _write(tmp_path / "coffeesense.config.json", "{not json")
    with pytest.raises(ConfigFileError):
        load_workspace_config(tmp_path, path)


def test_non_mapping_config_file_raises(tmp_path) -> None:
    path = _write(tmp_path / "coffeesense.config.yaml", "- a\n- b\n")
    with pytest.raises(ConfigFileError, match="must contain a mapping"):
        load_workspace_config(tmp_path, path)


def test_missing_explicit_config_file_raises(tmp_path) -> None:
    with pytest.raises(ConfigFileError, match="Cannot read"):
        load_workspace_config(tmp_path, tmp_path / "missing.yaml")


def test_invalid_declaration_in_file(tmp_path) -> None:
    path = _write(tmp_path / "coffeesense.config.yaml", "projects:\n  - tsconfig: x.json\n")
    with pytest.raises(InvalidDeclarationError):
        load_workspace_config(tmp_path, path)
