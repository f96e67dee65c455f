"""
Configuration models and workspace config loading for CoffeeSense
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from coffeesense.constants import ENV_CONFIG_PATH, WORKSPACE_CONFIG_FILENAMES
from coffeesense.errors import ConfigFileError, InvalidDeclarationError
from coffeesense.utils.path_utils import get_path_depth, normalize_absolute_path
from coffeesense.utils.workspace import find_config_file

logger = logging.getLogger(__name__)

SettingValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CompletionSettings(_CamelModel):
    auto_import: bool = Field(False, alias="autoImport")


class ValidationSettings(_CamelModel):
    script: bool = True


class LanguageFeatureSettings(_CamelModel):
    code_actions: bool = Field(True, alias="codeActions")
    update_import_on_file_move: bool = Field(True, alias="updateImportOnFileMove")


class TraceSettings(_CamelModel):
    server: Literal["off", "messages", "verbose"] = "off"


class DevSettings(_CamelModel):
    lsp_path: str = Field("", alias="lspPath")
    lsp_port: int = Field(-1, alias="lspPort")
    log_level: Literal["INFO", "DEBUG"] = Field("INFO", alias="logLevel")


class CoffeeSenseSettings(_CamelModel):
    """Server-side settings under the ``coffeesense`` section"""
    ignore_project_warning: bool = Field(False, alias="ignoreProjectWarning")
    use_workspace_dependencies: bool = Field(False, alias="useWorkspaceDependencies")
    completion: CompletionSettings = Field(default_factory=CompletionSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    language_features: LanguageFeatureSettings = Field(
        default_factory=LanguageFeatureSettings, alias="languageFeatures"
    )
    trace: TraceSettings = Field(default_factory=TraceSettings)
    dev: DevSettings = Field(default_factory=DevSettings)


class TypeScriptSettings(_CamelModel):
    tsdk: Optional[str] = None


class LSPConfig(_CamelModel):
    """Full language server settings as sent by the editor"""
    coffeesense: CoffeeSenseSettings = Field(default_factory=CoffeeSenseSettings)
    typescript: TypeScriptSettings = Field(default_factory=TypeScriptSettings)


def get_default_lsp_config() -> LSPConfig:
    return LSPConfig()


class CoffeeSenseProject(BaseModel):
    """A fully resolved project"""
    model_config = ConfigDict(frozen=True)

    root: str
    package: Optional[str] = None
    tsconfig: Optional[str] = None


class ProjectDeclaration(BaseModel):
    """A project entry as written by the user; overrides are relative to ``root``"""
    root: StrictStr
    package: Optional[StrictStr] = None
    tsconfig: Optional[StrictStr] = None

    @field_validator("root")
    @classmethod
    def _root_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project root must not be empty")
        return value


RawProjectDeclaration = Union[StrictStr, ProjectDeclaration]


class CoffeeSenseConfig(BaseModel):
    """User configuration: pass-through settings plus optional project list"""
    settings: Optional[Dict[str, SettingValue]] = None
    projects: Optional[List[RawProjectDeclaration]] = None

    @field_validator("projects")
    @classmethod
    def _no_blank_roots(cls, value: Optional[List[Any]]) -> Optional[List[Any]]:
        for entry in value or []:
            if isinstance(entry, str) and not entry.strip():
                raise ValueError("project path must not be empty")
        return value

    @classmethod
    def from_raw(cls, data: Mapping[str, Any] | None) -> "CoffeeSenseConfig":
        """Validate a plain mapping, raising InvalidDeclarationError on bad shapes."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as exc:
            raise InvalidDeclarationError(f"Invalid CoffeeSense configuration: {exc}") from exc


class CoffeeSenseFullConfig(BaseModel):
    """Resolved configuration: settings plus projects ordered deepest root first"""
    model_config = ConfigDict(frozen=True)

    settings: Dict[str, SettingValue] = Field(default_factory=dict)
    projects: Tuple[CoffeeSenseProject, ...] = ()

    def to_dict(self) -> dict:
        return {
            "settings": dict(self.settings),
            "projects": [project.model_dump(exclude_none=True) for project in self.projects],
        }


def find_workspace_config_file(workspace_path: str | Path) -> Optional[str]:
    """
    Locate the workspace config file.

    Priority:
    1. $COFFEESENSE_CONFIG (also read from a .env file), relative to the workspace
    2. The nearest coffeesense.config.{yaml,yml,json} in the workspace or its ancestors
    """
    load_dotenv()

    explicit = os.getenv(ENV_CONFIG_PATH)
    if explicit:
        return normalize_absolute_path(explicit, workspace_path)

    best: Optional[str] = None
    for file_name in WORKSPACE_CONFIG_FILENAMES:
        found = find_config_file(workspace_path, file_name)
        if found and (best is None or get_path_depth(found) > get_path_depth(best)):
            best = found
    return best


def _read_config_data(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        raise ConfigFileError(f"Cannot read config file {path}: {exc}", path=str(path)) from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigFileError(f"Cannot parse config file {path}: {exc}", path=str(path)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}",
            path=str(path),
        )
    return data


def load_workspace_config(
    workspace_path: str | Path,
    config_path: str | Path | None = None,
) -> Tuple[str, CoffeeSenseConfig]:
    """
    Load the user configuration for a workspace.

    Returns the directory project declarations are relative to (the config
    file's directory, or the workspace itself when there is no file) and the
    validated configuration.
    """
    workspace = normalize_absolute_path(workspace_path, os.getcwd())
    if config_path is not None:
        found = normalize_absolute_path(config_path, workspace)
    else:
        found = find_workspace_config_file(workspace)

    if found is None:
        logger.info("No CoffeeSense config file found for %s, using defaults", workspace)
        return workspace, CoffeeSenseConfig()

    logger.info("Loading CoffeeSense config from %s", found)
    data = _read_config_data(Path(found))
    return os.path.dirname(found), CoffeeSenseConfig.from_raw(data)
