"""Tool registry — typed tool catalog and structural schema export."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..errors import UnknownToolError

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    ADD_TWO_NUMBERS = "addTwoNumbers"
    CREATE_POST = "createPost"
    DEFINE_WORD = "defineWord"


@dataclass
class ToolParam:
    name: str
    type: str = "string"  # "string" | "number" | "integer" | "boolean" | "object"
    description: str = ""
    required: bool = True
    properties: List["ToolParam"] = field(default_factory=list)  # for type == "object"


@dataclass
class ToolResult:
    text: str
    ok: bool = True


@dataclass
class ToolDef:
    name: ToolName
    description: str
    params: List[ToolParam]
    handler: Callable[..., Awaitable[ToolResult]]
    needs_credentials: bool = False

    @property
    def parameter_schema(self) -> Dict[str, Any]:
        return object_schema(self.params)

    def describe(self) -> Dict[str, Any]:
        """Name, description and schema, without the handler."""
        return {
            "name": self.name.value,
            "description": self.description,
            "parameters": self.parameter_schema,
        }


def param_schema(param: ToolParam) -> Dict[str, Any]:
    if param.type == "object":
        schema = object_schema(param.properties)
    else:
        schema = {"type": param.type}
    if param.description:
        schema["description"] = param.description
    return schema


def object_schema(params: List[ToolParam]) -> Dict[str, Any]:
    """JSON-Schema-like object: {"type", "properties", "required"}."""
    return {
        "type": "object",
        "properties": {p.name: param_schema(p) for p in params},
        "required": [p.name for p in params if p.required],
    }


class ToolRegistry:
    """Catalog of tools keyed by ToolName.

    Built once at startup, then frozen and handed to the chat pipeline and
    the MCP adapter.
    """

    def __init__(self, tools: Optional[List[ToolDef]] = None):
        self._tools: Dict[ToolName, ToolDef] = {}
        self._frozen = False
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDef) -> ToolDef:
        if self._frozen:
            raise RuntimeError(f"Tool registry is frozen, cannot register {tool.name.value}")
        if tool.name in self._tools:
            logger.warning(f"Re-registering tool: {tool.name.value}")
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name.value}")
        return tool

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[ToolDef]:
        try:
            key = ToolName(name)
        except ValueError:
            return None
        return self._tools.get(key)

    def require(self, name: str) -> ToolDef:
        tool = self.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool

    def list(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def function_declarations(self) -> List[Dict[str, Any]]:
        """Catalog in the function-declaration shape the language model expects."""
        return self.list()

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self):
        return iter(self._tools.values())
