"""
src/orchestrator/transcript.py

Best-effort capture of the transcription text from a worker reply, for reporting only.
"""


import json
from typing import Optional


TRANSCRIPTION_TYPE = "transcription"
TRANSCRIBE_KEYWORD = "transcribe"
_QUOTES = ('"', "'")


def _from_envelope(output: str) -> Optional[str]:
    """{"ok":true,"type":"Transcription","data":{"text":"..."}} -> text"""

    try:
        payload = json.loads(output)
    except (json.JSONDecodeError, RecursionError, TypeError):
        return None

    if not isinstance(payload, dict) or payload.get("ok") is not True:
        return None
    if str(payload.get("type") or "").lower() != TRANSCRIPTION_TYPE:
        return None

    data = payload.get("data")
    text = data.get("text") if isinstance(data, dict) else None

    if isinstance(text, str) and text.strip():
        return text.strip()

    return None

def _unquote(text: str) -> str:

    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1]

    return text


def extract_transcript(task: str, output: str) -> Optional[str]:
    """
    Return a transcript candidate from one worker turn, or None.

    1) A success envelope of type Transcription wins.
    2) Otherwise, a transcription task with a non-blank reply (not a "CANNOT ..." refusal)
       gives the trimmed reply, minus one pair of wrapping quotes.
    """

    found = _from_envelope(output or "")

    if found is not None:
        return found

    text = (output or "").strip()

    if TRANSCRIBE_KEYWORD in (task or "").lower() and text and not text.upper().startswith("CANNOT"):
        return _unquote(text)

    return None
