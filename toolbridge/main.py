"""HTTP surface: chat, tool catalog, health, credentials ack, and the MCP SSE endpoints."""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .errors import BridgeError, ClientInputError
from .llm import LanguageModel
from .mcp_server import mount_mcp
from .pipeline import TurnOrchestrator
from .schemas import (
    ChatRequest,
    ChatResponse,
    CredentialsRequest,
    CredentialsResponse,
    ErrorResponse,
    HealthResponse,
    ToolsResponse,
)
from .session import SessionStore
from .tools import DictionaryClient, SocialPoster, ToolRegistry, build_registry

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request or tool call"},
    500: {"model": ErrorResponse, "description": "Model or tool failure"},
    504: {"model": ErrorResponse, "description": "Model or tool timed out"},
}


def create_app(cfg: Optional[Settings] = None,
               registry: Optional[ToolRegistry] = None,
               model: Optional[LanguageModel] = None,
               sessions: Optional[SessionStore] = None) -> FastAPI:
    cfg = cfg or default_settings
    registry = registry or build_registry(
        dictionary=DictionaryClient(cfg.dictionary_base_url, timeout=cfg.tool_timeout_s),
        poster=SocialPoster(),
    )
    sessions = sessions or SessionStore(cfg.session_max, cfg.session_ttl_s)
    model = model or LanguageModel(cfg.model_base_url, cfg.chat_model, cfg.model_timeout_s)
    orchestrator = TurnOrchestrator(
        registry, sessions, model,
        model_timeout=cfg.model_timeout_s, tool_timeout=cfg.tool_timeout_s,
    )

    app = FastAPI(title="ToolBridge", version="1.0.0")
    app.state.registry = registry
    app.state.sessions = sessions
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        return JSONResponse(status_code=400, content=ClientInputError(detail).to_dict())

    @app.post("/chat", response_model=ChatResponse, response_model_exclude_none=True,
              responses=ERROR_RESPONSES)
    async def chat(req: ChatRequest):
        outcome = await orchestrator.run_turn(
            req.message,
            req.model_api_key,
            user_id=req.user_id,
            credentials=req.social_credentials,
        )
        return ChatResponse(
            reply=outcome.reply,
            tool_used=outcome.tool_used,
            tool_result=outcome.tool_result,
        )

    @app.post("/credentials", response_model=CredentialsResponse,
              responses={400: ERROR_RESPONSES[400]})
    async def credentials(req: CredentialsRequest):
        if not req.user_id:
            raise ClientInputError("userId is required")
        # Acknowledged only; credentials travel with each chat request instead
        logger.info(f"[{req.user_id}] Credentials received (not stored)")
        return CredentialsResponse(
            message="Credentials received (not stored server-side for security)",
            user_id=req.user_id,
        )

    @app.get("/tools", response_model=ToolsResponse)
    async def tools():
        return {"tools": registry.list()}

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            status="OK",
            timestamp=datetime.now(timezone.utc).isoformat(),
            tools_count=len(registry),
            mcp_server="active",
            active_users=len(sessions),
        )

    mount_mcp(app, registry, tool_timeout=cfg.tool_timeout_s)
    logger.info(f"App ready: {len(registry)} tools, session cap={cfg.session_max}")
    return app


app = create_app()
