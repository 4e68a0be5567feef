"""Chat turn pipeline: classify → model call → optional tool round → synthesis.

A turn that uses a tool makes two model calls. The first is offered the
tool declarations and may return a function-call intent; the second gets
the tool result and is never offered tools, so it can only answer in
prose and cannot start another tool round.

Per turn the session grows by exactly:
  direct reply:  user message, model reply
  tool round:    user message, model tool call, user-role tool result, model reply
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import openai

from .errors import (
    BridgeError,
    ClientInputError,
    CollaboratorError,
    CollaboratorTimeout,
    INVALID_CREDENTIALS_DETAIL,
    sanitize_detail,
)
from .llm import LanguageModel, ModelReply
from .schemas import SocialCredentials
from .session import Message, Session, SessionStore
from .tools import ToolRegistry, execute_tool, matched_domains, should_use_tools, validate_args
from .tools.builtin.social import credentials_complete

logger = logging.getLogger(__name__)

CREDENTIALS_REQUIRED_REPLY = (
    "Twitter credentials are required to create posts. "
    "Please configure your Twitter API keys in settings."
)
EMPTY_REPLY = "I wasn't able to generate a response. Try rephrasing your message."


@dataclass
class TurnOutcome:
    reply: str
    tool_used: Optional[str] = None
    tool_result: Optional[str] = None


class TurnOrchestrator:
    def __init__(self, registry: ToolRegistry, sessions: SessionStore, model: LanguageModel,
                 model_timeout: float = 30.0, tool_timeout: float = 15.0):
        self.registry = registry
        self.sessions = sessions
        self.model = model
        self.model_timeout = model_timeout
        self.tool_timeout = tool_timeout

    async def run_turn(self, message: Optional[str], model_api_key: Optional[str],
                       user_id: str = "default",
                       credentials: Optional[SocialCredentials] = None) -> TurnOutcome:
        if not message:
            raise ClientInputError("Message is required")
        if not model_api_key:
            raise ClientInputError("Model API key is required")

        async with self.sessions.acquire(user_id) as session:
            return await self._run_locked(session, message, model_api_key, credentials)

    async def _run_locked(self, session: Session, message: str, api_key: str,
                          credentials: Optional[SocialCredentials]) -> TurnOutcome:
        uid = session.user_id
        t0 = time.monotonic()

        # Committed before the model call so a failed turn still leaves it in context
        session.append(Message.user_text(message))

        use_tools = should_use_tools(message)
        if use_tools:
            logger.info(f"[{uid}] Offering tools ({', '.join(matched_domains(message))}): '{message[:80]}'")
        else:
            logger.info(f"[{uid}] Plain chat: '{message[:80]}'")

        declarations = self.registry.function_declarations() if use_tools else None
        first = await self._call_model(session, api_key, declarations)

        if first.tool_call is None or not use_tools:
            reply = first.text or EMPTY_REPLY
            session.append(Message.model_text(reply))
            logger.info(f"[{uid}] Direct reply ({time.monotonic() - t0:.2f}s)")
            return TurnOutcome(reply=reply)

        call = first.tool_call
        logger.info(f"[{uid}] Model requested tool: {call.name}")

        tool = self.registry.get(call.name)
        if tool is not None and tool.needs_credentials and not _usable(credentials):
            logger.info(f"[{uid}] {call.name} needs credentials, none supplied; not executing")
            session.append(Message.model_text(CREDENTIALS_REQUIRED_REPLY))
            return TurnOutcome(reply=CREDENTIALS_REQUIRED_REPLY)
        if tool is None:
            logger.warning(f"[{uid}] Model requested unknown tool: {call.name}")
            tool = self.registry.require(call.name)

        model_args = call.args
        if tool.needs_credentials and isinstance(call.args, dict):
            # Request credentials replace whatever the model put in this slot
            model_args = {k: v for k, v in call.args.items() if k != "credentials"}
        args = validate_args(tool, model_args)
        if tool.needs_credentials:
            args["credentials"] = credentials.as_tool_arg()

        result = await execute_tool(tool, args, timeout=self.tool_timeout)

        # History keeps the model's arguments; credentials never enter it
        session.append(Message.tool_call(call.name, model_args, call.call_id))
        session.append(Message.tool_result(call.name, result.text, call.call_id))

        final = await self._call_model(session, api_key, None)
        reply = final.text or EMPTY_REPLY
        session.append(Message.model_text(reply))

        logger.info(f"[{uid}] Tool turn via {call.name} ({time.monotonic() - t0:.2f}s)")
        return TurnOutcome(reply=reply, tool_used=call.name, tool_result=result.text)

    async def _call_model(self, session: Session, api_key: str,
                          declarations: Optional[List[Dict[str, Any]]]) -> ModelReply:
        uid = session.user_id
        try:
            return await asyncio.wait_for(
                self.model.generate(list(session.turns), api_key, declarations),
                timeout=self.model_timeout,
            )
        except BridgeError:
            raise
        except (asyncio.TimeoutError, openai.APITimeoutError):
            logger.error(f"[{uid}] Model call timed out after {self.model_timeout:.0f}s")
            raise CollaboratorTimeout(f"Model call timed out after {self.model_timeout:.0f}s")
        except openai.AuthenticationError as e:
            logger.error(f"[{uid}] Model rejected API key: {type(e).__name__}")
            raise CollaboratorError(INVALID_CREDENTIALS_DETAIL)
        except Exception as e:
            logger.error(f"[{uid}] Model call failed: {type(e).__name__}: {e}")
            raise CollaboratorError(sanitize_detail(str(e)))


def _usable(credentials: Optional[SocialCredentials]) -> bool:
    return credentials is not None and credentials_complete(credentials.as_tool_arg())
