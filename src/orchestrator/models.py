"""
src/orchestrator/models.py

Pydantic models for coordinator decisions, the per-turn action log and the final result.
"""


from typing import Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict


class AgentActionRecord(BaseModel):
    """One turn in the audit trail (coordinator plan or worker execution)."""

    model_config = ConfigDict(frozen=True)

    agent: str
    action: str
    raw_result: str


class DelegateMessage(BaseModel):

    model_config = ConfigDict(frozen=True)

    action: Literal["DELEGATE"] = "DELEGATE"
    agent: str
    task: str


class DoneMessage(BaseModel):

    model_config = ConfigDict(frozen=True)

    action: Literal["DONE"] = "DONE"
    summary: str = ""


CoordinatorMessage = Union[DelegateMessage, DoneMessage]


class OrchestrationResult(BaseModel):
    """
    Snapshot handed back by the delegation loop.

    `summary` is None when the run was aborted (iteration ceiling) or cancelled;
    `actions` is still the partial log in that case.
    """

    model_config = ConfigDict(frozen=True)

    audio_path: str
    transcription: Optional[str] = None
    actions: Tuple[AgentActionRecord, ...] = ()
    summary: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.summary is not None
