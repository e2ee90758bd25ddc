"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- call_model(): one shot (no tool execution)
- extract_tool_calls(): normalise tool calls from a response choice
- OpenAIChatAgent: a TextAgent backed by Chat Completions; with a Toolbox it runs an
  iterative loop that executes tool calls and feeds results back
"""


import json
import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from config import MAX_TOOL_ROUNDS, OPENAI_MODEL
from tools.base import Toolbox


LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> AsyncOpenAI:
    """Shared client, created on first use so importing this module needs no API key."""

    return AsyncOpenAI(api_key=os.getenv("OPENAI_API_KEY"))


async def call_model(
        client: AsyncOpenAI,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        model: str = OPENAI_MODEL,
):
    """
    Low-level call to OpenAI Chat Completions with optional tool specs.
    Returns the raw response object.
    """

    kwargs: Dict[str, Any] = {"model": model, "messages": messages, "temperature": 0.2}

    if tools:
        kwargs["tools"] = tools
        kwargs["tool_choice"] = "auto"

    return await client.chat.completions.create(**kwargs)


def extract_tool_calls(choice) -> List[Dict[str, Any]]:
    """
    Pull the function calls a worker model asked for out of one response choice.

    Returns [{"name", "arguments", "id"}] ready for Toolbox.execute. Arguments that are
    not a JSON object become {}, so the toolbox reports the missing fields back to the model.
    """

    out = []
    tcs = getattr(choice.message, "tool_calls", None)

    if not tcs:
        return out

    for tc in tcs:
        if tc.type == "function" and tc.function:
            name = tc.function.name
            try:
                args = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                args = {}
            out.append({"name": name, "arguments": args if isinstance(args, dict) else {}, "id": tc.id})

    return out


class OpenAIChatAgent:
    """
    TextAgent over Chat Completions.

    Every run() starts a fresh conversation (system instructions + one user message);
    nothing is remembered between calls.
    """

    def __init__(
            self,
            name: str,
            instructions: str,
            *,
            capabilities: Sequence[str] = (),
            toolbox: Optional[Toolbox] = None,
            client: Optional[AsyncOpenAI] = None,
            model: str = OPENAI_MODEL,
            max_tool_rounds: int = MAX_TOOL_ROUNDS,
    ):

        self.name = name
        self.instructions = instructions
        self.capabilities = tuple(capabilities)
        self.toolbox = toolbox
        self.model = model
        self.max_tool_rounds = max_tool_rounds
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        return self._client or get_client()

    async def run(self, text: str) -> str:

        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": self.instructions},
            {"role": "user", "content": text.strip()},
        ]
        tool_specs = self.toolbox.specs() if self.toolbox else None

        for round_idx in range(self.max_tool_rounds):
            resp = await call_model(self.client, messages, tools=tool_specs, model=self.model)
            choice = resp.choices[0]
            tool_calls = extract_tool_calls(choice)

            # A normal message and no tool calls: we are done
            if not tool_calls or self.toolbox is None:
                return choice.message.content or ""

            messages.append(choice.message.model_dump(exclude_none=True))

            for tc in tool_calls:
                LOGGER.debug("%s round %d: calling %s", self.name, round_idx + 1, tc["name"])
                output = await self.toolbox.execute(tc["name"], tc["arguments"])
                messages.append({"role": "tool", "tool_call_id": tc["id"], "content": output})

        # Safety stop: out of rounds, ask for a final answer without tools
        LOGGER.info("%s stopped after %d tool rounds.", self.name, self.max_tool_rounds)
        resp = await call_model(self.client, messages, tools=None, model=self.model)

        return resp.choices[0].message.content or ""
