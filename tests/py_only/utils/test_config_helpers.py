import pytest

from coffeesense.config import CoffeeSenseFullConfig, get_default_lsp_config
from coffeesense.errors import InvalidDeclarationError
from coffeesense.utils.config_helpers import flatten_settings, get_setting, require_setting


def test_flatten_settings_uses_dotted_editor_keys() -> None:
    flat = flatten_settings(get_default_lsp_config())
    assert flat["coffeesense.validation.script"] is True
    assert flat["coffeesense.languageFeatures.codeActions"] is True
    assert flat["coffeesense.dev.lspPort"] == -1
    assert flat["typescript.tsdk"] is None


def test_get_setting_prefers_user_settings() -> None:
    config = CoffeeSenseFullConfig(settings={"coffeesense.validation.script": False})
    assert get_setting(config, "coffeesense.validation.script") is False


def test_get_setting_falls_back_to_server_defaults() -> None:
    config = CoffeeSenseFullConfig()
    assert get_setting(config, "coffeesense.trace.server") == "off"
    assert get_setting(None, "coffeesense.completion.autoImport") is False


def test_get_setting_returns_default_for_unknown_key() -> None:
    assert get_setting(CoffeeSenseFullConfig(), "unknown.key", 42) == 42
    assert get_setting(CoffeeSenseFullConfig(), "typescript.tsdk", "bundled") == "bundled"


def test_require_setting_raises_when_unset() -> None:
    with pytest.raises(InvalidDeclarationError, match="typescript.tsdk"):
        require_setting(CoffeeSenseFullConfig(), "typescript.tsdk")
    config = CoffeeSenseFullConfig(settings={"typescript.tsdk": "/opt/ts/lib"})
    assert require_setting(config, "typescript.tsdk") == "/opt/ts/lib"
