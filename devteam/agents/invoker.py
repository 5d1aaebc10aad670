"""Agent Invoker: runs one agent turn against the generation capability.

The generation capability is any async callable
`generate(role, system_instruction, prompt, temperature)` yielding text
fragments. The default one streams from a LangChain chat model chosen per
role by `role_models` in config.yaml (Gemini by default, Claude optional).

Each fragment is handed to the single subscriber (`on_chunk`) in arrival
order, and the final text is exactly the concatenation of those fragments.
Failures never propagate: they come back as an `Error: <message>` payload.
"""

import sys
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI

from devteam.agents.prompts import SYSTEM_PROMPTS
from devteam.config import get_config
from devteam.state import Role
from devteam.utils.parsing import stream_retrying

Generate = Callable[[Role, str, str, float], AsyncIterator[str]]


@dataclass
class InvocationResult:
    role: Role
    text: str
    chunks: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def make_llm(provider: str, model: str, temperature: float):
    """Instantiate the LangChain chat model for a configured provider."""
    if provider == "google":
        return ChatGoogleGenerativeAI(model=model, temperature=temperature)
    if provider == "anthropic":
        return ChatAnthropic(model=model, temperature=temperature)
    raise ValueError(f"Unknown model provider '{provider}'. Must be one of: google, anthropic")


def _chunk_text(chunk) -> str:
    """Text of a streamed message chunk; content may be a string or a list of parts."""
    content = chunk.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


async def langchain_generate(
    role: Role, system_instruction: str, prompt: str, temperature: float
) -> AsyncIterator[str]:
    """Stream text fragments for *role* from its configured chat model."""
    model_spec = get_config()["role_models"][role.value]
    llm = make_llm(model_spec.get("provider", "google"), model_spec["model"], temperature)

    messages = [
        {"role": "system", "content": system_instruction},
        {"role": "user", "content": prompt},
    ]
    async for chunk in llm.astream(messages):
        text = _chunk_text(chunk)
        if text:
            yield text


class AgentInvoker:
    """Runs agent turns; one instance is shared by every role in a session."""

    def __init__(self, generate: Generate | None = None, temperature: float | None = None):
        self._generate = generate or langchain_generate
        self._temperature = temperature

    async def invoke(
        self,
        role: Role,
        prompt: str,
        on_chunk: Callable[[str], None] | None = None,
    ) -> InvocationResult:
        """Run *role* on *prompt*, forwarding each fragment to *on_chunk*."""
        temperature = self._temperature
        if temperature is None:
            temperature = get_config().get("temperature", 0.7)

        chunks: list[str] = []
        try:
            async for attempt in stream_retrying(f"{role.value} agent", lambda: not chunks):
                with attempt:
                    async for fragment in self._generate(role, SYSTEM_PROMPTS[role], prompt, temperature):
                        if not fragment:
                            continue
                        chunks.append(fragment)
                        if on_chunk is not None:
                            on_chunk(fragment)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            print(f"[devteam] Error running {role.value} agent: {exc!r}", file=sys.stderr)
            return InvocationResult(role=role, text=f"Error: {message}", chunks=chunks, error=message)

        return InvocationResult(role=role, text="".join(chunks), chunks=chunks)
