import sys
from datetime import datetime
from pathlib import Path

from toolchain_bootstrap.core.errors import BootstrapError
from toolchain_bootstrap.core.logging import LoggingManager
from toolchain_bootstrap.modules.workflow import BootstrapWorkflow
from toolchain_bootstrap.scripts.config_parsing import BootstrapConfig

CONFIG_PATH = Path("config/bootstrap.yaml")
LOGS_DIR = Path("logs")
DEFAULT_REPORT_PATH = "result/bootstrap_report.json"


def main():
    # 1. Timestamped log file next to the console output
    LOGS_DIR.mkdir(exist_ok=True)
    log_start = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = LOGS_DIR / f"logs-{log_start}.log"

    # 2. Read the bootstrap config, falling back to defaults
    try:
        config = BootstrapConfig.load(str(CONFIG_PATH) if CONFIG_PATH.exists() else None)
    except BootstrapError as e:
        logger = LoggingManager(log_file=str(log_file))
        logger.setup()
        logger.error(f"Invalid config {CONFIG_PATH}: {e.message}")
        return e.returncode
    config = config.override(log_file=config.log_file or str(log_file))
    logger = LoggingManager(config.log_level, config.log_file)
    logger.setup()
    if not CONFIG_PATH.exists():
        logger.warning(f"{CONFIG_PATH} not found, using defaults.")

    # 3. Install the toolchain, then source its environment
    workflow = BootstrapWorkflow(config, logger)
    try:
        report = workflow.run()
    except BootstrapError as e:
        logger.error(f"Bootstrap stopped: {e.message}")
        report = workflow.report

    # 4. Summarize and save the report
    workflow.write_report(config.report_path or DEFAULT_REPORT_PATH)
    logger.info("Bootstrap Report:")
    print(workflow.render_table())
    return report.exit_status


if __name__ == "__main__":
    sys.exit(main())
