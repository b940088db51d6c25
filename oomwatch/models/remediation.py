# oomwatch/models/remediation.py
from pydantic import BaseModel
from typing import List, Literal, Optional

RESTART_ANNOTATION = "restartTimestamp"


class FailureMatch(BaseModel):
    instance: str
    container: str
    exit_code: int
    reason: Optional[str] = None
    previous: bool = False  # matched on the previous termination record

    def describe(self) -> str:
        return f"Pod {self.instance}, Container {self.container}: ExitCode={self.exit_code}, Reason={self.reason}"


class RemediationOutcome(BaseModel):
    target: str
    success: bool
    stage: Literal["fetch", "apply", "done"]
    trigger: Optional[str] = None
    error: Optional[str] = None


class CycleReport(BaseModel):
    namespace: str
    instances_checked: int = 0
    instances_owned: int = 0
    failure: Optional[FailureMatch] = None
    outcomes: List[RemediationOutcome] = []
    observation_error: Optional[str] = None

    @property
    def restart_needed(self) -> bool:
        return self.failure is not None
