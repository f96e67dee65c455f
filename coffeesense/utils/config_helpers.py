"""Utilities for safe settings access with defaults."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

from coffeesense.config import CoffeeSenseFullConfig, get_default_lsp_config
from coffeesense.errors import InvalidDeclarationError

T = TypeVar("T")


def flatten_settings(model: BaseModel, prefix: str = "") -> dict[str, Any]:
    """Flatten a settings model into dotted editor-style keys."""
    flat: dict[str, Any] = {}

    def _walk(value: Any, path: str) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                _walk(item, f"{path}.{key}" if path else key)
        else:
            flat[path] = value

    _walk(model.model_dump(by_alias=True), prefix)
    return flat


def get_setting(config: CoffeeSenseFullConfig | None, key: str, default: T = None) -> T:
    """Get a setting from the resolved config, then the server defaults, then ``default``."""
    if config is not None and key in config.settings:
        return config.settings[key]
    value = flatten_settings(get_default_lsp_config()).get(key)
    return value if value is not None else default


def require_setting(config: CoffeeSenseFullConfig | None, key: str, error_msg: str | None = None) -> Any:
    """Get a required setting or raise InvalidDeclarationError."""
    value = get_setting(config, key, None)
    if value is None:
        msg = error_msg or f"Required setting '{key}' is not set"
        raise InvalidDeclarationError(msg)
    return value
