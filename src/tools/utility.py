"""
src/tools/utility.py — transcription and date/time tools for the Utility worker

Provides:
- OpenAITranscriptionService: speech-to-text through the OpenAI audio API
- DateTimeService: current local/UTC time, used by the model to resolve "next Friday"
- UtilityTools: the tool handlers, built with their services injected
"""


from __future__ import annotations
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from openai import AsyncOpenAI

from config import OPENAI_TRANSCRIBE_MODEL
from tools import results
from tools.base import Tool, Toolbox, tool_spec


LOGGER = logging.getLogger(__name__)


# --- Services ------------------------------------------------------------------
class OpenAITranscriptionService:

    def __init__(self, client: AsyncOpenAI, model: str = OPENAI_TRANSCRIBE_MODEL):

        self._client = client
        self._model = model

    async def transcribe(self, file_path: str) -> str:
        """
        Transcribe an audio file (mp3/wav/m4a) and return the raw text.

        Raises:
            FileNotFoundError if the file does not exist.
            RuntimeError if the service returns no text.
        """

        path = Path(file_path)

        if not path.is_file():
            raise FileNotFoundError(f"Audio file not found: {file_path}")

        with path.open("rb") as f:
            resp = await self._client.audio.transcriptions.create(model=self._model, file=f)

        text = (resp.text or "").strip()

        if not text:
            raise RuntimeError("Transcription returned empty text.")

        LOGGER.info("Transcribed %s (%d chars).", path.name, len(text))

        return text


class DateTimeService:

    def __init__(self, now: Optional[Callable[[], datetime]] = None):

        self._now = now or (lambda: datetime.now(timezone.utc))

    def get_current_datetime(self) -> str:
        """LOCAL=yyyy-MM-ddTHH:mm:ss+zz:zz;UTC=yyyy-MM-ddTHH:mm:ssZ"""

        now = self._now()

        if now.tzinfo is None:
            now = now.astimezone()

        local = now.astimezone()
        utc = now.astimezone(timezone.utc)

        return f"LOCAL={local.isoformat(timespec='seconds')};UTC={utc.strftime('%Y-%m-%dT%H:%M:%SZ')}"


# --- Tool handlers -------------------------------------------------------------
class UtilityTools:

    CAPABILITIES = ("TranscribeVoiceRecording(audioPath)", "GetCurrentDateTime()")

    def __init__(self, transcription: OpenAITranscriptionService, clock: DateTimeService):

        self.transcription = transcription
        self.clock = clock

    async def transcribe_voice_recording(self, recording: str) -> str:

        if not (recording or "").strip():
            raise ValueError("Recording path empty.")
        if not Path(recording).is_file():
            raise FileNotFoundError(f"Audio file not found: {recording}")

        text = await self.transcription.transcribe(recording)

        return results.ok("Transcription", {"text": text})

    def get_current_datetime(self) -> str:

        return results.ok("DateTime", {"value": self.clock.get_current_datetime()})

    def toolbox(self) -> Toolbox:

        return Toolbox([
            Tool(
                name="TranscribeVoiceRecording",
                handler=self.transcribe_voice_recording,
                result_type="Transcription",
                spec=tool_spec(
                    "TranscribeVoiceRecording",
                    "Transcribe the given audio file (mp3/wav/m4a) and return raw text.",
                    {
                        "properties": {"recording": {"type": "string", "description": "Path to recording file."}},
                        "required": ["recording"],
                    },
                ),
            ),
            Tool(
                name="GetCurrentDateTime",
                handler=self.get_current_datetime,
                result_type="DateTime",
                spec=tool_spec(
                    "GetCurrentDateTime",
                    "Return the current date/time to support normalization of relative or partial dates. "
                    "Format: LOCAL=yyyy-MM-ddTHH:mm:ssK;UTC=yyyy-MM-ddTHH:mm:ssZ",
                    {},
                ),
            ),
        ])
