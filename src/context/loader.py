"""
src/context/loader.py

Prompt templates for the coordinator and the workers, read from prompts/*.md.
"""


import re
from pathlib import Path


PROMPTS_PATH = Path(__file__).resolve().parents[2] / "prompts"

_PLACEHOLDER = re.compile(r"\{\{([A-Z0-9_]+)\}\}")


def load_prompt(name: str, base: Path = PROMPTS_PATH) -> str:

    path = Path(base) / name

    if not path.is_file():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        text = f.read()

    if not text.strip():
        raise ValueError(f"Prompt file is empty: {path}")

    return text


def render(template: str, **values: str) -> str:
    """Replace {{KEY}} placeholders; unknown placeholders are left as they are."""

    return _PLACEHOLDER.sub(lambda m: str(values.get(m.group(1), m.group(0))), template)
