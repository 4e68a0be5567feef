"""LLM client — renders session history for an OpenAI-compatible chat
endpoint and parses replies into text or a function-call intent."""
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from .config import settings
from .errors import ToolArgumentError
from .session import Message, Role, ToolCallContent, ToolResultContent

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. When tools are available, call one only if it "
    "is needed to answer. When you are given a tool result, answer the user "
    "in plain language using that result."
)


@dataclass
class ToolCall:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)
    call_id: str = ""


@dataclass
class ModelReply:
    text: str = ""
    tool_call: Optional[ToolCall] = None


def to_openai_tools(declarations: List[dict]) -> List[dict]:
    return [{"type": "function", "function": decl} for decl in declarations]


def render_message(message: Message) -> dict:
    content = message.content
    if isinstance(content, ToolCallContent):
        return {
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": content.call_id,
                "type": "function",
                "function": {"name": content.name, "arguments": json.dumps(content.args)},
            }],
        }
    if isinstance(content, ToolResultContent):
        return {"role": "tool", "tool_call_id": content.call_id, "content": content.display_text}
    role = "assistant" if message.role == Role.MODEL else "user"
    return {"role": role, "content": content.text}


def render_history(history: List[Message]) -> List[dict]:
    return [{"role": "system", "content": SYSTEM_PROMPT}] + [render_message(m) for m in history]


def parse_reply(response) -> ModelReply:
    """Extract text or the first function call from a chat completion."""
    message = response.choices[0].message
    tool_calls = getattr(message, "tool_calls", None)
    if tool_calls:
        call = tool_calls[0]
        raw = call.function.arguments or "{}"
        try:
            args = json.loads(raw)
        except json.JSONDecodeError:
            raise ToolArgumentError(f"Arguments for {call.function.name} are not valid JSON")
        if len(tool_calls) > 1:
            logger.warning(f"Model requested {len(tool_calls)} tools, using only {call.function.name}")
        return ModelReply(
            text=message.content or "",
            tool_call=ToolCall(
                name=call.function.name,
                args=args,
                call_id=call.id or f"call_{uuid.uuid4().hex[:12]}",
            ),
        )
    return ModelReply(text=(message.content or "").strip())


class LanguageModel:
    """Chat model behind an OpenAI-compatible API.

    The API key is supplied per call and never kept between calls.
    """

    def __init__(self, base_url: str = "", model: str = "", timeout: float = 0):
        self.base_url = base_url or settings.model_base_url
        self.model = model or settings.chat_model
        self.timeout = timeout or settings.model_timeout_s

    async def generate(self, history: List[Message], api_key: str,
                       tools: Optional[List[dict]] = None) -> ModelReply:
        request = {"model": self.model, "messages": render_history(history)}
        if tools:
            request["tools"] = to_openai_tools(tools)

        masked = '***' + api_key[-4:] if len(api_key) > 4 else '***'
        logger.debug(f"LLM request: model={self.model}, key={masked}, "
                     f"messages={len(request['messages'])}, tools={len(tools or [])}")

        async with AsyncOpenAI(api_key=api_key, base_url=self.base_url,
                               timeout=self.timeout, max_retries=0) as client:
            response = await client.chat.completions.create(**request)

        reply = parse_reply(response)
        if reply.tool_call:
            logger.info(f"LLM function call: {reply.tool_call.name}")
        else:
            logger.info(f"LLM reply: '{reply.text[:200]}'")
        return reply
