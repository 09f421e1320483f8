import os

from toolchain_bootstrap.scripts.environment_management import EnvironmentManager


def test_setup_environment(monkeypatch):
    monkeypatch.setenv("TEST_ENV_GONE", "old")
    monkeypatch.setenv("TEST_ENV_VAR", "")
    monkeypatch.delenv("TEST_ENV_VAR")
    manager = EnvironmentManager({"TEST_ENV_VAR": "test_value"}, ["TEST_ENV_GONE"])
    manager.setup()
    assert os.environ["TEST_ENV_VAR"] == "test_value"
    assert "TEST_ENV_GONE" not in os.environ


def test_render_exports():
    manager = EnvironmentManager({"B": "two words", "A": "/opt/bin"}, ["C"])
    assert manager.render_exports() == "export A=/opt/bin\nexport B='two words'\nunset C"
