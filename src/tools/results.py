"""
src/tools/results.py — structured tool results

Every tool returns a JSON string in one of two shapes:
    {"ok": true,  "type": "Reminder", "data": {...}}
    {"ok": false, "type": "Reminder", "error": {"code": "...", "message": "..."}}
Null fields are left out. The orchestrator reads these opportunistically (e.g. the
transcript heuristic) but never requires them.
"""


from typing import Any, Dict, Optional
from pydantic import BaseModel, ValidationError


class ToolError(BaseModel):

    code: str
    message: str


class ToolEnvelope(BaseModel):

    ok: bool
    type: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[ToolError] = None


def ok(type: str, data: Dict[str, Any]) -> str:
    """Serialise a successful result."""

    return ToolEnvelope(ok=True, type=type, data=data).model_dump_json(exclude_none=True)

def error(code: str, message: str, type: Optional[str] = None) -> str:
    """Serialise a failed result."""

    return ToolEnvelope(ok=False, type=type, error=ToolError(code=code, message=message)).model_dump_json(exclude_none=True)


def is_envelope(text: str) -> bool:
    """True when text already has one of the two shapes above."""

    try:
        ToolEnvelope.model_validate_json(text)
    except ValidationError:
        return False

    return True
