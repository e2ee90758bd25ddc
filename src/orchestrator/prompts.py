"""
src/orchestrator/prompts.py

Fixed prompt strings for the coordinator and the context blob rebuilt every turn.
"""


import json
from typing import Dict, Iterable, Optional

from orchestrator.models import AgentActionRecord


SEED_TEMPLATE = "process voice recording in file {path}"

CORRECTIVE_INSTRUCTION = (
    'Malformed JSON. Return {"Action":"DELEGATE|DONE","Agent":"<agent name when delegating>",'
    '"Task":"<task when delegating>","Summary":"<summary when done>"}.'
)

GUIDANCE = (
    "Decide next step. If a reminder or email can be created based on the transcript, "
    "delegate to OfficeAutomation with an explicit SetReminder or SendEmail task including "
    "extracted task, due date, optional reminder date. Otherwise gather missing info or DONE with summary."
)

REPETITION_GUIDANCE = (
    "You have delegated the same task several times in a row. "
    "Either delegate a different tool or agent, or respond DONE with a summary."
)

REQUIRED_RESPONSE: Dict[str, str] = {
    "Action": "DELEGATE|DONE",
    "Agent": "<when delegating>",
    "Task": "<instruction when delegating>",
    "Summary": "<when done>",
}

# Appended to the coordinator's system instructions by the agent provider
RESPONSE_SHAPE_INSTRUCTION = (
    'Always respond ONLY in minified JSON with this schema: {"Action":"DELEGATE|DONE",'
    '"Agent":"<agent name when delegating>","Task":"<task when delegating>","Summary":"<summary when done>"}. '
    "When delegating transcription prefer: TranscribeVoiceRecording(/absolute/path.mp3)."
)


def seed_prompt(absolute_path: str) -> str:

    return SEED_TEMPLATE.format(path=absolute_path)

def context_prompt(
        transcript: Optional[str],
        actions: Iterable[AgentActionRecord],
        *,
        repeated: bool = False,
) -> str:
    """
    Serialise everything the coordinator needs for its next decision.

    The coordinator keeps no memory between calls, so this blob is the whole history.
    """

    guidance = GUIDANCE + (" " + REPETITION_GUIDANCE if repeated else "")

    return json.dumps(
        {
            "Transcript": transcript,
            "Actions": [
                {"Agent": a.agent, "Action": a.action, "RawResult": a.raw_result} for a in actions
            ],
            "Guidance": guidance,
            "RequiredResponse": REQUIRED_RESPONSE,
        },
        ensure_ascii=False,
    )
