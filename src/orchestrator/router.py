"""
src/orchestrator/router.py

Router: drives coordinator -> worker -> coordinator turns for one voice recording.

Each turn:
    1) ask the coordinator (recorded as a "Plan" action, even when malformed)
    2) DONE      -> keep the summary and stop
       malformed -> re-prompt with a corrective instruction, no worker turn
       DELEGATE  -> run the named worker (or record UNKNOWN_AGENT:<name>)
    3) rebuild the coordinator context from the transcript and the action log
The loop stops early on cancellation and gives up after `max_iterations` plans;
both leave `summary` as None.
"""


import asyncio
import logging
import os
from typing import Optional

from config import ActionTag, MAX_ITERATIONS
from orchestrator import prompts
from orchestrator.agents import AgentSet
from orchestrator.aggregator import ResultAggregator
from orchestrator.contract import MalformedResponseError, parse_coordinator_message
from orchestrator.guard import RepetitionGuard
from orchestrator.models import DoneMessage, OrchestrationResult
from orchestrator.transcript import extract_transcript


LOGGER = logging.getLogger(__name__)

UNKNOWN_AGENT_PREFIX = "UNKNOWN_AGENT:"


def _validate_audio_path(audio_path: str) -> str:
    """Fail fast on a blank or missing recording; returns the absolute path."""

    if audio_path is None or not str(audio_path).strip():
        raise ValueError("Audio path empty.")
    if not os.path.isfile(audio_path):
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    return os.path.abspath(audio_path)


async def execute(
        audio_path: str,
        agents: AgentSet,
        *,
        max_iterations: int = MAX_ITERATIONS,
        cancel: Optional[asyncio.Event] = None,
) -> OrchestrationResult:
    """
    Process one voice recording with the given coordinator and workers.

    Args:
        audio_path: Recording to process; must be an existing file.
        agents: Coordinator + worker registry. Only read, so one AgentSet can serve
            concurrent runs.
        max_iterations: Upper bound on coordinator turns.
        cancel: When set, no further agent calls are made and the partial result is returned.

    Returns:
        OrchestrationResult; `summary` is None unless the coordinator reported DONE.

    Raises:
        ValueError / FileNotFoundError for a bad audio path (before any agent call).
        Whatever a worker raises: worker failures end the run.
    """

    absolute_path = _validate_audio_path(audio_path)

    coordinator = agents.coordinator
    workers = agents.workers
    result = ResultAggregator(audio_path)
    guard = RepetitionGuard()
    prompt = prompts.seed_prompt(absolute_path)

    for turn in range(1, max_iterations + 1):
        if cancel is not None and cancel.is_set():
            LOGGER.info("Cancelled before turn %d; returning partial result.", turn)
            return result.snapshot()

        raw = await coordinator.run(prompt)
        result.record(coordinator.name, ActionTag.PLAN.value, raw)

        try:
            message = parse_coordinator_message(raw)
        except MalformedResponseError as e:
            LOGGER.warning("Turn %d: malformed coordinator reply (%s).", turn, e.reason)
            guard.observe(None)
            prompt = prompts.CORRECTIVE_INSTRUCTION
            continue

        guard.observe(message)

        if isinstance(message, DoneMessage):
            LOGGER.info("Turn %d: coordinator finished.", turn)
            result.finish(message.summary)
            return result.snapshot()

        action = workers.classify_action(message.task)
        worker = workers.find(message.agent)

        if worker is None:
            LOGGER.warning("Turn %d: unknown agent '%s'.", turn, message.agent)
            result.record(message.agent, action, f"{UNKNOWN_AGENT_PREFIX}{message.agent}")
        else:
            LOGGER.info("Turn %d: delegating %s to %s.", turn, action, worker.name)
            try:
                output = await worker.run(message.task)
            except Exception:
                LOGGER.exception("Turn %d: worker %s failed.", turn, worker.name)
                raise
            result.record(worker.name, action, output)

            if result.transcription is None and result.capture_transcription(extract_transcript(message.task, output)):
                LOGGER.info("Turn %d: transcript captured from %s.", turn, worker.name)

        repeated = guard.triggered
        if repeated:
            LOGGER.warning("Turn %d: coordinator is repeating '%s'.", turn, message.task)

        prompt = prompts.context_prompt(result.transcription, result.actions, repeated=repeated)

    LOGGER.warning("Stopped after %d coordinator turns without DONE.", max_iterations)

    return result.snapshot()
