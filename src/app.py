"""
src/app.py
"""


import json
import logging
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

import gradio as gr

from config import MAX_ITERATIONS, configure_logging
from orchestrator.agents import AgentSet
from orchestrator.models import OrchestrationResult
from orchestrator.provider import build_agent_set
from orchestrator.router import execute
from tools.exports import export_result_pdf


LOGGER = logging.getLogger(__name__)

APP_TITLE = "Voice2Action"
APP_DESC = (
    "Record or upload a short voice note like "
    "'remind me to send the quarterly report next Friday, nudge me on Wednesday'. "
    "A planner delegates transcription, reminders and emails to worker agents."
)


@lru_cache(maxsize=1)
def _agents() -> AgentSet:
    """Built on first request; the AgentSet is read-only and shared by all runs."""

    return build_agent_set()


@lru_cache(maxsize=1)
def _report_dir() -> Path:
    """One temp directory per app process for the PDF reports."""

    return Path(tempfile.mkdtemp(prefix="v2a-"))


def status_text(result: OrchestrationResult) -> str:

    if result.completed:
        return f"Completed in {len(result.actions)} steps."

    return f"Not completed: stopped after {len(result.actions)} steps without a summary."


def result_payload(result: OrchestrationResult) -> str:

    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


async def handle_recording(audio_path: Optional[str], max_iterations: int = MAX_ITERATIONS) -> Tuple[str, str, str, str, Optional[str]]:
    """
    Run the orchestrator on one recording and shape the output for the UI:
    (transcript, summary, status, result JSON, PDF report path)
    """

    if not audio_path:
        return "", "", "Please record or upload an audio file first.", "{}", None

    try:
        agents = _agents()
    except FileNotFoundError as e:
        LOGGER.error("Agent setup failed: %s", e)
        return "", "", f"Setup error: {e}", "{}", None

    try:
        result = await execute(audio_path, agents, max_iterations=int(max_iterations))
    except (ValueError, FileNotFoundError) as e:
        return "", "", f"Invalid input: {e}", "{}", None

    with tempfile.NamedTemporaryFile(dir=_report_dir(), prefix="voice-command-", suffix=".pdf", delete=False) as f:
        report = f.name
    export_result_pdf(result, report)

    return (
        result.transcription or "",
        result.summary or "",
        status_text(result),
        result_payload(result),
        report,
    )


def app():
    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)

        with gr.Row():
            audio = gr.Audio(label="Voice command", sources=["upload", "microphone"], type="filepath")
            iterations = gr.Slider(
                label="Max planner turns",
                minimum=1,
                maximum=20,
                step=1,
                value=MAX_ITERATIONS,
            )
        run = gr.Button("Run", variant="primary")

        transcript = gr.Textbox(label="Transcript", lines=3)
        summary = gr.Textbox(label="Summary", lines=2)
        status = gr.Markdown()
        out = gr.Code(label="Result", language="json")
        report = gr.File(label="Report (PDF)")

        run.click(
            fn=handle_recording,
            inputs=[audio, iterations],
            outputs=[transcript, summary, status, out, report],
        )

    return demo


if __name__ == "__main__":

    configure_logging()
    app().launch()

# EOF
