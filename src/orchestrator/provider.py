"""
src/orchestrator/provider.py

Builds the default AgentSet: a Planner coordinator and the Utility / OfficeAutomation workers.

Services are passed in (or created here) and handed to the tool handlers at construction,
so nothing reaches them through module-level state.
"""


from pathlib import Path
from typing import Optional

from openai import AsyncOpenAI

from config import COORDINATOR_NAME, OPENAI_MODEL
from context.loader import PROMPTS_PATH, load_prompt, render
from orchestrator.agents import AgentSet, WorkerRegistry
from orchestrator.llm_openai import OpenAIChatAgent, get_client
from orchestrator.prompts import RESPONSE_SHAPE_INSTRUCTION
from tools.office import EmailService, OfficeTools, ReminderService
from tools.utility import DateTimeService, OpenAITranscriptionService, UtilityTools


UTILITY_AGENT = "Utility"
OFFICE_AGENT = "OfficeAutomation"


def build_agent_set(
        *,
        client: Optional[AsyncOpenAI] = None,
        prompts_path: Path = PROMPTS_PATH,
        coordinator_name: str = COORDINATOR_NAME,
        model: str = OPENAI_MODEL,
        transcription: Optional[OpenAITranscriptionService] = None,
        clock: Optional[DateTimeService] = None,
        reminders: Optional[ReminderService] = None,
        email: Optional[EmailService] = None,
) -> AgentSet:
    """
    Wire prompts, services and tools into a ready-to-run AgentSet.

    Raises:
        FileNotFoundError if a prompt template is missing.
    """

    client = client or get_client()

    utility = UtilityTools(transcription or OpenAITranscriptionService(client), clock or DateTimeService())
    office = OfficeTools(reminders or ReminderService(), email or EmailService())

    workers = WorkerRegistry([
        OpenAIChatAgent(
            UTILITY_AGENT,
            load_prompt("utility.md", prompts_path),
            capabilities=UtilityTools.CAPABILITIES,
            toolbox=utility.toolbox(),
            client=client,
            model=model,
        ),
        OpenAIChatAgent(
            OFFICE_AGENT,
            load_prompt("office-automation.md", prompts_path),
            capabilities=OfficeTools.CAPABILITIES,
            toolbox=office.toolbox(),
            client=client,
            model=model,
        ),
    ])

    # Coordinator (LLM only, no tools)
    template = load_prompt("coordinator-template.md", prompts_path)
    instructions = render(template, AGENT_CATALOG=workers.catalog()) + "\n" + RESPONSE_SHAPE_INSTRUCTION
    coordinator = OpenAIChatAgent(coordinator_name, instructions, client=client, model=model)

    return AgentSet(coordinator, workers)
