"""Tests for the chat-completion collaborator.

``backend.scanner.completion._get_llm`` is patched so no provider client is
ever constructed.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from backend.scanner.completion import _get_llm, _to_messages, chat_completion


def test_roles_map_to_message_types() -> None:
    converted = _to_messages(
        [
            {"role": "system", "content": "You classify website copy."},
            {"role": "user", "content": "Classify this."},
            {"role": "assistant", "content": "{}"},
            {"content": "no role"},
        ]
    )
    assert [type(m) for m in converted] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
    assert converted[1].content == "Classify this."


def test_returns_model_text_and_passes_temperature() -> None:
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content='{"confidence": "high"}')
    with patch("backend.scanner.completion._get_llm", return_value=llm) as get_llm:
        text = chat_completion([{"role": "user", "content": "hi"}], 0.2)

    assert text == '{"confidence": "high"}'
    get_llm.assert_called_once_with(0.2)
    (sent,), _ = llm.invoke.call_args
    assert isinstance(sent[0], HumanMessage)


def test_provider_errors_propagate() -> None:
    llm = MagicMock()
    llm.invoke.side_effect = RuntimeError("401 Unauthorized")
    with patch("backend.scanner.completion._get_llm", return_value=llm):
        with pytest.raises(RuntimeError, match="401"):
            chat_completion([{"role": "user", "content": "hi"}], 0.2)


def test_ollama_client_gets_request_timeout(monkeypatch) -> None:
    monkeypatch.setattr("backend.config.settings.llm_provider", "ollama")
    monkeypatch.setattr("backend.config.settings.analyze_timeout", 7.5)
    with patch("langchain_ollama.ChatOllama") as chat_ollama:
        _get_llm(0.2)

    kwargs = chat_ollama.call_args.kwargs
    assert kwargs["client_kwargs"] == {"timeout": 7.5}
    assert kwargs["temperature"] == 0.2


def test_openai_client_gets_request_timeout(monkeypatch) -> None:
    monkeypatch.setattr("backend.config.settings.llm_provider", "openai")
    monkeypatch.setattr("backend.config.settings.analyze_timeout", 7.5)
    with patch("langchain_openai.ChatOpenAI") as chat_openai:
        _get_llm(0.2)

    assert chat_openai.call_args.kwargs["timeout"] == 7.5
