import pytest


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Extends the test report to surface better info on failure.
    """
    outcome = yield
    rep = outcome.get_result()

    # Only the test call itself, not setup or teardown
    if rep.when == "call" and rep.failed:
        doc = item.obj.__doc__
        if doc:
            from inspect import cleandoc
            rep.sections.append(("Test Description", cleandoc(doc)))


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's COFFEESENSE_CONFIG or .env file out of the tests."""
    monkeypatch.delenv("COFFEESENSE_CONFIG", raising=False)
    monkeypatch.setattr("coffeesense.config.load_dotenv", lambda *args, **kwargs: False)
