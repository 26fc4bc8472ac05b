"""Persona and system prompt construction."""

from dataclasses import dataclass

from familiar.config import Settings

DEFAULT_PERSONA_PROMPT = """You are {name}, an AI agent running locally on the user's computer.
Your personality is logical, direct and quietly caring.
You often explain things with short scientific analogies.
When asked to do something, do it efficiently.
You can act on the user's system through the tools listed below.
"""

TOOLS_PROMPT_TEMPLATE = """
You have access to the following tools: {schema}

To use a tool, respond with a JSON object in this format ONLY:
{{ "tool": "tool_name", "args": {{ ... }} }}
The object must have exactly the fields "tool" and "args".
If you use a tool, do not write anything else."""


@dataclass(frozen=True)
class Persona:
    """Name and base system prompt of the agent."""

    name: str
    system_prompt: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "Persona":
        prompt = settings.persona_prompt or DEFAULT_PERSONA_PROMPT
        return cls(name=settings.persona_name, system_prompt=prompt.format(name=settings.persona_name))


def build_system_prompt(persona: Persona, schema_document: str) -> str:
    """Combine the persona text with the tool-schema addendum."""
    return persona.system_prompt + TOOLS_PROMPT_TEMPLATE.format(schema=schema_document)
