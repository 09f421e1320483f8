"""
Result records shared by the bootstrap steps
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

PENDING = "PENDING"
RUNNING = "RUNNING"
PASS = "PASS"
FAIL = "FAIL"
SKIPPED = "SKIPPED"


@dataclass
class StepResult:
    name: str
    status: str = PENDING
    returncode: int = 0
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == PASS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BootstrapReport:
    steps: List[StepResult] = field(default_factory=list)
    exit_status: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exit_status": self.exit_status,
            "steps": [step.to_dict() for step in self.steps],
        }
