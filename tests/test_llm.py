"""Tests for llm.py — history rendering, reply parsing, request shape."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from toolbridge.errors import ToolArgumentError
from toolbridge.llm import (
    SYSTEM_PROMPT,
    LanguageModel,
    parse_reply,
    render_history,
    render_message,
    to_openai_tools,
)
from toolbridge.session import Message


def _completion(content=None, tool_calls=None):
    message = MagicMock()
    message.content = content
    message.tool_calls = tool_calls
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _tool_call(name, arguments, call_id="call_abc"):
    call = MagicMock()
    call.id = call_id
    call.function.name = name
    call.function.arguments = arguments
    return call


class TestRenderMessage:
    def test_user_text(self):
        assert render_message(Message.user_text("hi")) == {"role": "user", "content": "hi"}

    def test_model_text(self):
        assert render_message(Message.model_text("yo")) == {"role": "assistant", "content": "yo"}

    def test_tool_call(self):
        rendered = render_message(Message.tool_call("addTwoNumbers", {"a": 2, "b": 3}, "call_1"))
        assert rendered["role"] == "assistant"
        call = rendered["tool_calls"][0]
        assert call["id"] == "call_1"
        assert call["function"]["name"] == "addTwoNumbers"
        assert json.loads(call["function"]["arguments"]) == {"a": 2, "b": 3}

    def test_tool_result(self):
        rendered = render_message(Message.tool_result("addTwoNumbers", "The sum of 2 and 3 is 5", "call_1"))
        assert rendered == {
            "role": "tool",
            "tool_call_id": "call_1",
            "content": "Tool result: The sum of 2 and 3 is 5",
        }

    def test_history_starts_with_system_prompt(self):
        history = render_history([Message.user_text("hi"), Message.model_text("hello")])
        assert history[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert [m["role"] for m in history[1:]] == ["user", "assistant"]


class TestParseReply:
    def test_text(self):
        reply = parse_reply(_completion(content="  Hello!  "))
        assert reply.text == "Hello!"
        assert reply.tool_call is None

    def test_empty_content(self):
        assert parse_reply(_completion(content=None)).text == ""

    def test_tool_call(self):
        reply = parse_reply(_completion(tool_calls=[_tool_call("defineWord", '{"word": "hello"}')]))
        assert reply.tool_call.name == "defineWord"
        assert reply.tool_call.args == {"word": "hello"}
        assert reply.tool_call.call_id == "call_abc"

    def test_first_of_many_tool_calls(self):
        reply = parse_reply(_completion(tool_calls=[
            _tool_call("defineWord", '{"word": "a"}', "c1"),
            _tool_call("defineWord", '{"word": "b"}', "c2"),
        ]))
        assert reply.tool_call.call_id == "c1"

    def test_missing_call_id_generated(self):
        reply = parse_reply(_completion(tool_calls=[_tool_call("defineWord", "{}", call_id="")]))
        assert reply.tool_call.call_id.startswith("call_")

    def test_empty_arguments(self):
        reply = parse_reply(_completion(tool_calls=[_tool_call("defineWord", "")]))
        assert reply.tool_call.args == {}

    def test_invalid_json_arguments(self):
        with pytest.raises(ToolArgumentError):
            parse_reply(_completion(tool_calls=[_tool_call("addTwoNumbers", "{a: 2")]))


class TestToOpenAITools:
    def test_wraps_declarations(self, registry):
        tools = to_openai_tools(registry.function_declarations())
        assert all(t["type"] == "function" for t in tools)
        assert {t["function"]["name"] for t in tools} == {"addTwoNumbers", "createPost", "defineWord"}


class TestGenerate:
    def _patched_client(self, response):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=response)
        client_cls = MagicMock()
        client_cls.return_value.__aenter__.return_value = client
        client_cls.return_value.__aexit__.return_value = False
        return client_cls, client

    @pytest.mark.asyncio
    async def test_without_tools(self):
        client_cls, client = self._patched_client(_completion(content="hi"))
        llm = LanguageModel("https://llm.test/v1", "test-model", timeout=5)

        with patch("toolbridge.llm.AsyncOpenAI", client_cls):
            reply = await llm.generate([Message.user_text("hello")], api_key="key-123")

        assert reply.text == "hi"
        client_cls.assert_called_once_with(
            api_key="key-123", base_url="https://llm.test/v1", timeout=5, max_retries=0)
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert "tools" not in kwargs
        assert kwargs["messages"][-1] == {"role": "user", "content": "hello"}

    @pytest.mark.asyncio
    async def test_with_tools(self, registry):
        response = _completion(tool_calls=[_tool_call("addTwoNumbers", '{"a": 1, "b": 2}')])
        client_cls, client = self._patched_client(response)
        llm = LanguageModel("https://llm.test/v1", "test-model", timeout=5)

        with patch("toolbridge.llm.AsyncOpenAI", client_cls):
            reply = await llm.generate([Message.user_text("1+2")], "key-123",
                                       registry.function_declarations())

        assert reply.tool_call.name == "addTwoNumbers"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert len(kwargs["tools"]) == 3

    def test_defaults_from_settings(self):
        from toolbridge.config import settings
        llm = LanguageModel()
        assert llm.model == settings.chat_model
        assert llm.base_url == settings.model_base_url
