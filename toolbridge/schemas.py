"""Pydantic request/response models for the HTTP surface."""
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SocialCredentials(_CamelModel):
    """X API keys sent by the client with each request; never stored."""
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    access_token: Optional[str] = None
    access_secret: Optional[str] = None

    def as_tool_arg(self) -> Dict[str, Optional[str]]:
        return self.model_dump(by_alias=True)


class ChatRequest(_CamelModel):
    # message and key are checked by the pipeline so a missing one is a 400, not a 422
    message: Optional[str] = None
    user_id: str = "default"
    model_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("modelApiKey", "model_api_key", "geminiApiKey"))
    social_credentials: Optional[SocialCredentials] = Field(
        default=None,
        validation_alias=AliasChoices("socialCredentials", "social_credentials", "twitterCreds"))


class ChatResponse(_CamelModel):
    reply: str
    tool_used: Optional[str] = None
    tool_result: Optional[str] = None


class CredentialsRequest(_CamelModel):
    user_id: Optional[str] = None
    credentials: Optional[SocialCredentials] = None


class CredentialsResponse(_CamelModel):
    message: str
    user_id: str


class ToolInfo(BaseModel):
    name: str
    description: str
    parameters: Dict[str, Any]


class ToolsResponse(BaseModel):
    tools: List[ToolInfo]


class HealthResponse(_CamelModel):
    status: str
    timestamp: str
    tools_count: int
    mcp_server: str
    active_users: int


class ErrorResponse(BaseModel):
    error: str
    detail: str
