import run
from toolchain_bootstrap.core.logging import LoggingManager


def test_run_reports_invalid_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "bootstrap.yaml").write_text("bootstrap:\n  colour: blue\n")
    try:
        assert run.main() == 1
    finally:
        LoggingManager().setup()
    log_files = list((tmp_path / "logs").glob("logs-*.log"))
    assert len(log_files) == 1
    assert "Unknown config keys: colour" in log_files[0].read_text()
    assert not (tmp_path / "result").exists()
