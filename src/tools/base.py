"""
src/tools/base.py — tool registry shared by the worker agents

A Toolbox maps a tool name to (handler, OpenAI function spec, result type) and is the
execution bridge used by the LLM tool-calling loop: the model picks a tool, we run the
handler and hand back a JSON envelope (see tools.results).
"""


import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tools import results


LOGGER = logging.getLogger(__name__)


def tool_spec(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Describe one worker tool as a strict OpenAI function schema (no extra arguments)."""

    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": parameters.get("properties", {}),
                "required": parameters.get("required", []),
                "additionalProperties": False,
            },
        },
    }


@dataclass(frozen=True)
class Tool:

    name: str
    handler: Callable[..., Any]
    spec: Dict[str, Any]
    result_type: Optional[str] = None


class Toolbox:

    def __init__(self, tools: List[Tool]):

        self._tools: Dict[str, Tool] = {t.name: t for t in tools}

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def specs(self) -> List[Dict[str, Any]]:
        """JSON schemas describing the tools we expose to the model."""

        return [t.spec for t in self._tools.values()]

    async def execute(self, name: str, arguments: Dict[str, Any]) -> str:
        """
        Run one tool call and return its envelope.

        Handlers may be plain functions or coroutines. Envelope strings pass through and any
        other value is wrapped as {"value": ...}. An unknown tool, bad arguments or a
        raising handler all come back as an error envelope so the model can react.
        """

        tool = self._tools.get(name)

        if tool is None:
            return results.error("UNKNOWN_TOOL", f"Unknown tool: {name}")

        try:
            out = tool.handler(**arguments)
            if inspect.isawaitable(out):
                out = await out
        except Exception as e:
            LOGGER.warning("Tool %s failed: %s", name, e)
            return results.error(type(e).__name__, str(e), type=tool.result_type)

        if isinstance(out, str) and results.is_envelope(out):
            return out

        return results.ok(tool.result_type or name, {"value": out})
