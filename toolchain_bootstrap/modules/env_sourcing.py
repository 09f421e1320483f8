"""
Environment sourcing module for the Toolchain Bootstrap Tool
Evaluates a shell environment file with the interpreter's `.` builtin and
brings the exported variables it sets into this process.
"""
import json
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from toolchain_bootstrap.core.errors import BootstrapError, EnvFileNotFoundError, EnvSourcingError
from toolchain_bootstrap.core.logging import LoggingManager
from toolchain_bootstrap.core.results import FAIL, PASS, RUNNING, StepResult
from toolchain_bootstrap.scripts.config_parsing import DEFAULT_ENV_FILE, DEFAULT_INTERPRETER
from toolchain_bootstrap.scripts.environment_management import EnvironmentManager

STEP_NAME = "source-env"

ENV_MARKER = "__TOOLCHAIN_BOOTSTRAP_ENV__"
DUMP_CODE = f"import json, os, sys; sys.stdout.write({ENV_MARKER!r} + json.dumps(dict(os.environ)) + '\\n')"
# $1: environment file, $2: python executable, $3: dump code
SOURCE_SCRIPT = '"$2" -c "$3" && . "$1" && "$2" -c "$3"'


@dataclass
class SourcedEnvironment:
    path: Path
    changed: Dict[str, str] = field(default_factory=dict)
    unset: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.changed and not self.unset


class EnvSourcer:
    """
    Sources an environment file and applies the result to os.environ.
    """
    def __init__(self, interpreter: str = DEFAULT_INTERPRETER, logger: Optional[LoggingManager] = None):
        self.interpreter = interpreter
        self.logger = logger or LoggingManager()

    def source(self, path=DEFAULT_ENV_FILE) -> SourcedEnvironment:
        """
        Evaluate the file and report the exported variables it set, changed or unset.
        Raises:
            EnvFileNotFoundError: the file does not exist.
            EnvSourcingError: the interpreter failed while evaluating it.
        """
        env_path = Path(path).expanduser().absolute()
        if not env_path.exists():
            raise EnvFileNotFoundError(f"{env_path}: No such file or directory")
        argv = [self.interpreter, "-c", SOURCE_SCRIPT, self.interpreter, str(env_path), sys.executable, DUMP_CODE]
        self.logger.debug(f"Sourcing {env_path} with {self.interpreter}")
        try:
            completed = subprocess.run(argv, capture_output=True, text=True, errors="replace", check=False)
        except FileNotFoundError as e:
            raise EnvSourcingError(f"{self.interpreter}: command not found", 127) from e
        except OSError as e:
            raise EnvSourcingError(f"{self.interpreter}: {e.strerror or e}", 126) from e

        if completed.returncode != 0:
            stderr = completed.stderr.strip()
            raise EnvSourcingError(
                f"Sourcing {env_path} failed with status {completed.returncode}" + (f": {stderr}" if stderr else ""),
                completed.returncode,
            )

        dumps = []
        for line in completed.stdout.splitlines():
            # output the file printed without a trailing newline shares a line with the dump
            output, marker, dump = line.partition(ENV_MARKER)
            if output:
                self.logger.debug(f"{env_path}: {output}")
            if marker:
                dumps.append(json.loads(dump))
        if len(dumps) != 2:
            raise EnvSourcingError(f"Could not read the environment after sourcing {env_path}")
        before, after = dumps

        changed = {k: v for k, v in after.items() if before.get(k) != v}
        unset = sorted(k for k in before if k not in after)
        return SourcedEnvironment(env_path, changed, unset)

    def apply(self, sourced: SourcedEnvironment):
        EnvironmentManager(sourced.changed, sourced.unset).setup()
        for name in sorted(sourced.changed):
            self.logger.debug(f"export {name}")
        for name in sourced.unset:
            self.logger.debug(f"unset {name}")

    def render_exports(self, sourced: SourcedEnvironment) -> str:
        return EnvironmentManager(sourced.changed, sourced.unset).render_exports()

    def source_and_apply(self, path=DEFAULT_ENV_FILE, strict: bool = False):
        """
        Run the whole sourcing step.
        Returns:
            (StepResult, SourcedEnvironment or None when sourcing failed)
        """
        result = StepResult(STEP_NAME, status=RUNNING)
        try:
            sourced = self.source(path)
        except BootstrapError as e:
            self.logger.error(e.message)
            result.status = FAIL
            result.returncode = e.returncode
            result.detail = e.message
            if strict:
                raise
            return result, None
        self.apply(sourced)
        result.status = PASS
        if sourced.empty:
            result.detail = "no variables changed"
        else:
            result.detail = f"{len(sourced.changed)} set, {len(sourced.unset)} unset"
        self.logger.info(f"Sourced {sourced.path}: {result.detail}")
        return result, sourced
