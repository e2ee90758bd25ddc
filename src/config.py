"""
src/config.py
"""


import logging
import os
from enum import Enum
from typing import Optional, Tuple


class ActionTag(str, Enum):

    PLAN = "Plan"
    TRANSCRIBE = "Transcribe"
    SET_REMINDER = "SetReminder"
    SEND_EMAIL = "SendEmail"
    GET_CURRENT_DATETIME = "GetCurrentDateTime"
    SEND_FALLBACK_NOTIFICATION = "SendFallbackNotification"
    UNKNOWN = "Unknown"


# Checked in this order when tagging a delegated task
KNOWN_ACTIONS: Tuple[ActionTag, ...] = (
    ActionTag.TRANSCRIBE,
    ActionTag.SET_REMINDER,
    ActionTag.SEND_EMAIL,
    ActionTag.GET_CURRENT_DATETIME,
    ActionTag.SEND_FALLBACK_NOTIFICATION,
)


# Models
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TRANSCRIBE_MODEL: str = os.getenv("OPENAI_TRANSCRIBE_MODEL", "whisper-1")

# Orchestration
COORDINATOR_NAME: str = os.getenv("V2A_COORDINATOR_NAME", "Planner")
MAX_ITERATIONS: int = int(os.getenv("V2A_MAX_ITERATIONS", "8"))   # Coordinator turns per run
MAX_TOOL_ROUNDS: int = 3                                           # Tool-calling rounds per worker call
REPEAT_WINDOW: int = 3                                             # Plans compared by the repetition guard
REPEAT_SIMILARITY: int = 90                                        # rapidfuzz score, 0-100

# Logging
LOG_LEVEL: str = os.getenv("V2A_LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install one stream handler on the root logger (safe to call twice)."""

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or LOG_LEVEL).strip().upper(), logging.INFO))

    if not any(getattr(h, "_v2a_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._v2a_handler = True
        root.addHandler(handler)
# EOF
