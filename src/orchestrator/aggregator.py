"""
src/orchestrator/aggregator.py

Accumulates per-turn records into the final OrchestrationResult.
"""


from typing import List, Optional

from orchestrator.models import AgentActionRecord, OrchestrationResult


class ResultAggregator:
    """
    Mutable state of one orchestration run.

    - actions: append-only, chronological
    - transcription: set once, later candidates are ignored
    - summary: set when the coordinator reports DONE
    """

    def __init__(self, audio_path: str):

        self.audio_path = audio_path
        self._actions: List[AgentActionRecord] = []
        self._transcription: Optional[str] = None
        self._summary: Optional[str] = None

    @property
    def actions(self) -> List[AgentActionRecord]:
        return list(self._actions)

    @property
    def transcription(self) -> Optional[str]:
        return self._transcription

    @property
    def summary(self) -> Optional[str]:
        return self._summary

    def record(self, agent: str, action: str, raw_result: str) -> AgentActionRecord:

        rec = AgentActionRecord(agent=agent, action=action, raw_result=raw_result or "")
        self._actions.append(rec)

        return rec

    def capture_transcription(self, text: Optional[str]) -> bool:
        """Store `text` if nothing was captured yet. Returns True when stored."""

        if self._transcription is not None or text is None:
            return False

        self._transcription = text

        return True

    def finish(self, summary: str) -> None:

        self._summary = summary

    def snapshot(self) -> OrchestrationResult:

        return OrchestrationResult(
            audio_path=self.audio_path,
            transcription=self._transcription,
            actions=tuple(self._actions),
            summary=self._summary,
        )
