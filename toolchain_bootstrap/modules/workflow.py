"""
Bootstrap workflow module for the Toolchain Bootstrap Tool
Runs the fetch-and-execute step, then the environment sourcing step.
"""
import json
from pathlib import Path
from typing import Optional

from tabulate import tabulate

from toolchain_bootstrap.core.errors import BootstrapError
from toolchain_bootstrap.core.logging import LoggingManager
from toolchain_bootstrap.core.results import FAIL, PENDING, SKIPPED, BootstrapReport, StepResult
from toolchain_bootstrap.modules import env_sourcing, installer_fetch
from toolchain_bootstrap.modules.env_sourcing import EnvSourcer
from toolchain_bootstrap.modules.installer_fetch import InstallerFetcher
from toolchain_bootstrap.scripts.config_parsing import BootstrapConfig


class BootstrapWorkflow:
    """
    Sequential two-step bootstrap.

    With strict off (the default) every failure is logged and ignored and the
    overall exit status is the status of the last step, the sourcing step.
    With strict on the first failure is raised and the remaining step is skipped.
    """
    def __init__(self, config: Optional[BootstrapConfig] = None, logger: Optional[LoggingManager] = None):
        self.config = config or BootstrapConfig()
        self.logger = logger or LoggingManager(self.config.log_level)
        self.fetcher = InstallerFetcher(self.config.interpreter, self.config.timeout, self.logger)
        self.sourcer = EnvSourcer(self.config.interpreter, self.logger)
        self.report = BootstrapReport()
        self.sourced = None

    def _reset(self):
        self.report = BootstrapReport(steps=[
            StepResult(installer_fetch.STEP_NAME, status=PENDING),
            StepResult(env_sourcing.STEP_NAME, status=PENDING),
        ])
        self.sourced = None

    def run(self) -> BootstrapReport:
        """
        Run both steps in order and return the report.
        Raises:
            BootstrapError: in strict mode, the first step failure.
        """
        cfg = self.config
        self._reset()
        self.logger.info(f"Bootstrapping toolchain from {cfg.url} (strict={cfg.strict})")
        try:
            fetched = self.fetcher.fetch_and_execute(cfg.url, cfg.installer_args, cfg.sha256, strict=cfg.strict)
            self.report.steps[0] = fetched
            sourced_result, self.sourced = self.sourcer.source_and_apply(cfg.env_path, strict=cfg.strict)
            self.report.steps[1] = sourced_result
        except BootstrapError as e:
            self._mark_failure(e)
            raise
        self.report.exit_status = self.report.steps[-1].returncode
        self.logger.info(f"Bootstrap finished with exit status {self.report.exit_status}")
        return self.report

    def _mark_failure(self, error: BootstrapError):
        failed = False
        for step in self.report.steps:
            if failed:
                step.status = SKIPPED
            elif step.status == PENDING:
                # the step that raised never got its result recorded
                step.status = FAIL
                step.returncode = error.returncode
                step.detail = error.message
                failed = True
        self.report.exit_status = error.returncode

    def write_report(self, report_path) -> str:
        path = Path(report_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.report.to_dict(), f, indent=2)
        self.logger.info(f"Report saved to {path}")
        return str(path)

    def render_table(self) -> str:
        table_data = [
            [step.name, step.status, step.returncode, step.detail or "-"]
            for step in self.report.steps
        ]
        headers = ["Step", "Status", "Code", "Detail"]
        return tabulate(table_data, headers=headers, tablefmt="github")
