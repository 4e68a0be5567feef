"""Error taxonomy surfaced at the HTTP boundary.

Tool executors never raise these; they fold their own failures into
ToolResult.text. Everything here escalates to a structured
{"error": category, "detail": detail} response.
"""

INVALID_CREDENTIALS_DETAIL = "Invalid model API key. Please check your credentials."


class BridgeError(Exception):
    status_code: int = 500
    category: str = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.category, "detail": self.detail}


class ClientInputError(BridgeError):
    status_code = 400
    category = "invalid_request"


class UnknownToolError(ClientInputError):
    category = "unknown_tool"

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ToolArgumentError(ClientInputError):
    category = "invalid_tool_arguments"


class CollaboratorError(BridgeError):
    status_code = 500
    category = "chat_failed"


class ToolExecutionError(BridgeError):
    status_code = 500
    category = "tool_execution_failed"


class CollaboratorTimeout(BridgeError):
    status_code = 504
    category = "timeout"


def sanitize_detail(message: str) -> str:
    """Hide provider-specific credential diagnostics behind a generic message."""
    if "api key" in message.lower():
        return INVALID_CREDENTIALS_DETAIL
    return message
