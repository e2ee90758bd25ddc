"""
src/orchestrator/agents.py

Text agents, the worker registry and the agent set handed to the delegation loop.

Both the coordinator and the workers satisfy the same `TextAgent` protocol: a name,
a list of advertised capabilities and an async `run(text) -> text`. The loop only
ever talks to that protocol, so LLM-backed agents and test doubles are interchangeable.
"""


from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from config import ActionTag, KNOWN_ACTIONS


@runtime_checkable
class TextAgent(Protocol):

    name: str
    capabilities: Sequence[str]

    async def run(self, text: str) -> str:
        ...


def capability_name(capability: str) -> str:
    """'SetReminder(task, dueDate, reminderDate?)' -> 'SetReminder'"""

    return capability.split("(", 1)[0].strip()


class WorkerRegistry:
    """
    Ordered, read-only collection of workers.

    Routing is by exact (case-insensitive) name only; capabilities are advertised to
    the coordinator as catalog text and used locally for action classification.
    """

    def __init__(self, workers: Iterable[TextAgent] = ()):

        self._workers: Tuple[TextAgent, ...] = tuple(workers)
        seen = set()

        for w in self._workers:
            key = w.name.casefold()
            if key in seen:
                raise ValueError(f"Duplicate worker name '{w.name}'.")
            seen.add(key)

    def __iter__(self) -> Iterator[TextAgent]:
        return iter(self._workers)

    def __len__(self) -> int:
        return len(self._workers)

    def find(self, name: str) -> Optional[TextAgent]:
        """Return the worker whose name matches `name` ignoring case, else None."""

        key = (name or "").strip().casefold()

        return next((w for w in self._workers if w.name.casefold() == key), None)

    def catalog(self) -> str:
        """Catalog lines for the coordinator prompt, e.g. '- Utility: GetCurrentDateTime()'."""

        return "\n".join(f"- {w.name}: {', '.join(w.capabilities)}" for w in self._workers)

    def tool_names(self) -> List[str]:

        names: List[str] = []

        for w in self._workers:
            for cap in w.capabilities:
                name = capability_name(cap)
                if name and name not in names:
                    names.append(name)

        return names

    def classify_action(self, task: str) -> str:
        """
        Tag a delegated task for the action log.

        Known verbs are tried first, then the tool names the workers advertise.
        Diagnostic only: the result never influences control flow.
        """

        text = (task or "").casefold()

        for tag in KNOWN_ACTIONS:
            if tag.value.casefold() in text:
                return tag.value

        for name in self.tool_names():
            if name.casefold() in text:
                return name

        return ActionTag.UNKNOWN.value


@dataclass(frozen=True, init=False)
class AgentSet:
    """One coordinator plus its workers; built once per session and never mutated."""

    coordinator: TextAgent
    workers: WorkerRegistry

    def __init__(self, coordinator: TextAgent, workers: Union[WorkerRegistry, Iterable[TextAgent]] = ()):

        if not isinstance(workers, WorkerRegistry):
            workers = WorkerRegistry(workers)

        object.__setattr__(self, "coordinator", coordinator)
        object.__setattr__(self, "workers", workers)
