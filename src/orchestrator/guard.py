"""
src/orchestrator/guard.py

Repetition guard: notice when the coordinator keeps proposing the same delegation.

Tasks are compared with RapidFuzz (token_sort_ratio, 0-100) so that small rewordings
("Transcribe /a.mp3" vs "transcribe file /a.mp3") still count as the same task.
"""


from collections import deque
from typing import Deque, Optional

from rapidfuzz import fuzz

from config import REPEAT_SIMILARITY, REPEAT_WINDOW
from orchestrator.models import CoordinatorMessage, DelegateMessage


class RepetitionGuard:
    """Loop-local; feed it every coordinator decision (None for malformed ones)."""

    def __init__(self, window: int = REPEAT_WINDOW, threshold: int = REPEAT_SIMILARITY):

        if window < 2:
            raise ValueError("window must be at least 2")

        self.window = window
        self.threshold = threshold
        self._recent: Deque[Optional[DelegateMessage]] = deque(maxlen=window)

    def observe(self, message: Optional[CoordinatorMessage]) -> None:

        self._recent.append(message if isinstance(message, DelegateMessage) else None)

    def same_task(self, a: DelegateMessage, b: DelegateMessage) -> bool:

        if a.agent.casefold() != b.agent.casefold():
            return False

        return fuzz.token_sort_ratio(a.task, b.task, processor=str.lower) >= self.threshold

    @property
    def triggered(self) -> bool:
        """True when the last `window` plans all delegate materially the same task."""

        if len(self._recent) < self.window or any(m is None for m in self._recent):
            return False

        latest = self._recent[-1]

        return all(self.same_task(m, latest) for m in self._recent)
