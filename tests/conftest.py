import pytest

from gh_recap.config import reset_config


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    """Run every test against built-in defaults with no server token."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GH_RECAP_CONFIG", str(tmp_path / "missing-config.json"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def client():
    from gh_recap import create_app
    from gh_recap.extensions import recap_cache

    recap_cache.clear()
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()
