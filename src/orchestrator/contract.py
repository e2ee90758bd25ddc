"""
src/orchestrator/contract.py

Parse one coordinator reply into a DELEGATE or DONE decision.

The coordinator is asked for minified JSON:
    {"Action":"DELEGATE|DONE","Agent":"...","Task":"...","Summary":"..."}
Anything else (free text, wrong action tag, blank agent/task) raises
MalformedResponseError, which the loop turns into a corrective re-prompt.
"""


import json
import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from orchestrator.models import CoordinatorMessage, DelegateMessage, DoneMessage


_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


class MalformedResponseError(ValueError):
    """Coordinator output that is not a valid DELEGATE/DONE message."""

    def __init__(self, reason: str, raw: str = ""):

        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class _RawMessage(BaseModel):

    action: Optional[str] = None
    agent: Optional[str] = None
    task: Optional[str] = None
    summary: Optional[str] = None


def _strip_fence(text: str) -> str:

    m = _FENCE.match(text)

    return m.group(1) if m else text

def _load_object(raw: str) -> Dict[str, Any]:

    text = _strip_fence((raw or "").strip())

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        reason = e.msg if isinstance(e, json.JSONDecodeError) else "nested too deeply"
        raise MalformedResponseError(f"not JSON ({reason})", raw) from e

    if not isinstance(data, dict):
        raise MalformedResponseError("JSON is not an object", raw)

    # Property names are case-insensitive
    return {str(k).lower(): v for k, v in data.items()}


def parse_coordinator_message(raw: str) -> CoordinatorMessage:
    """
    Decode a coordinator reply.

    Returns:
        DoneMessage when Action is DONE (any case); a missing Summary becomes "".
        DelegateMessage when Action is DELEGATE (any case) with non-blank Agent and Task.

    Raises:
        MalformedResponseError for every other input.
    """

    fields = _load_object(raw)

    try:
        msg = _RawMessage.model_validate(fields)
    except ValidationError as e:
        raise MalformedResponseError(f"unexpected field types: {e.error_count()} error(s)", raw) from e

    action = (msg.action or "").strip().upper()

    if action == "DONE":
        return DoneMessage(summary=msg.summary or "")

    if action == "DELEGATE":
        if not (msg.agent or "").strip():
            raise MalformedResponseError("DELEGATE without Agent", raw)
        if not (msg.task or "").strip():
            raise MalformedResponseError("DELEGATE without Task", raw)
        return DelegateMessage(agent=msg.agent.strip(), task=msg.task)

    raise MalformedResponseError(f"unsupported Action '{msg.action}'", raw)
