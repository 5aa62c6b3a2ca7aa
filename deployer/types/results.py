# deployer/types/results.py

from typing import List, Optional, Literal

from msgspec import Struct, field


class DeploymentResult(Struct, frozen=True):
    target: str
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class TargetOutcome(Struct):
    target: str
    status: Literal["deployed", "failed", "skipped", "dry_run"]
    argument: Optional[str] = None
    result: Optional[DeploymentResult] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    exit_code: Optional[int] = None


class PipelineResult(Struct):
    network: str
    mode: str
    outcomes: List[TargetOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(o.status in ("deployed", "dry_run") for o in self.outcomes)

    @property
    def deployed(self) -> List[str]:
        return [o.target for o in self.outcomes if o.status == "deployed"]

    @property
    def failed(self) -> Optional[TargetOutcome]:
        for outcome in self.outcomes:
            if outcome.status == "failed":
                return outcome
        return None

    @property
    def returncode(self) -> int:
        failed = self.failed
        if failed is None:
            return 0
        return failed.exit_code or 1
