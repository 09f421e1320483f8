from toolchain_bootstrap.core.logging import LoggingManager


def test_logging_manager():
    manager = LoggingManager(log_level="DEBUG")
    manager.setup()
    manager.debug("Debug message")
    manager.info("Info message")
    manager.warning("Warning message")
    manager.error("Error message")


def test_logging_manager_file(tmp_path):
    log_file = tmp_path / "bootstrap.log"
    manager = LoggingManager(log_level="info", log_file=str(log_file))
    manager.setup()
    manager.debug("hidden detail")
    manager.warning("installer checksum skipped")
    LoggingManager().setup()
    content = log_file.read_text()
    assert "installer checksum skipped" in content
    assert "hidden detail" not in content
