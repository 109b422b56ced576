"""Text-completion collaborator.

``chat_completion`` takes role-tagged messages and a sampling temperature and
returns the model's text synchronously.  The provider is chosen by
``settings.llm_provider`` (``openai`` or ``ollama``).  Errors propagate; the
classifier owns the recovery policy.
"""

from __future__ import annotations

from typing import Any, Callable

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from backend.config import settings

# (messages, temperature) -> generated text
CompletionFn = Callable[[list[dict[str, str]], float], str]


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm(temperature: float) -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            temperature=temperature,
            max_tokens=settings.completion_max_tokens,
            timeout=settings.analyze_timeout,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=temperature,
        client_kwargs={"timeout": settings.analyze_timeout},
    )


def _to_messages(messages: list[dict[str, str]]) -> list[BaseMessage]:
    converted: list[BaseMessage] = []
    for message in messages:
        role = message.get("role", "user")
        content = message.get("content", "")
        if role == "system":
            converted.append(SystemMessage(content=content))
        elif role == "assistant":
            converted.append(AIMessage(content=content))
        else:
            converted.append(HumanMessage(content=content))
    return converted


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def chat_completion(messages: list[dict[str, str]], temperature: float) -> str:
    """Send *messages* to the configured chat model and return its text."""
    llm = _get_llm(temperature)
    response = llm.invoke(_to_messages(messages))
    content = response.content if hasattr(response, "content") else response
    return content if isinstance(content, str) else str(content)
