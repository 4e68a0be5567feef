"""Tool executor — validates model-supplied arguments and dispatches tool calls."""
import asyncio
import logging
import time
from typing import Any, Dict, List

from ..errors import CollaboratorTimeout, ToolArgumentError, ToolExecutionError, sanitize_detail
from .registry import ToolDef, ToolParam, ToolResult

logger = logging.getLogger(__name__)


def _check_type(param: ToolParam, value: Any, path: str) -> Any:
    if param.type == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ToolArgumentError(f"Argument '{path}' must be a number")
        return value
    if param.type == "integer":
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ToolArgumentError(f"Argument '{path}' must be an integer")
        return value
    if param.type == "boolean":
        if not isinstance(value, bool):
            raise ToolArgumentError(f"Argument '{path}' must be a boolean")
        return value
    if param.type == "object":
        if not isinstance(value, dict):
            raise ToolArgumentError(f"Argument '{path}' must be an object")
        # Nested required fields are left to the tool, which fails closed with a readable result
        return _validate_params(param.properties, value, prefix=f"{path}.", enforce_required=False)
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument '{path}' must be a string")
    return value


def _validate_params(params: List[ToolParam], args: Dict[str, Any], prefix: str = "",
                     enforce_required: bool = True) -> Dict[str, Any]:
    clean = {}
    for param in params:
        path = prefix + param.name
        if param.name not in args or args[param.name] is None:
            if param.required and enforce_required:
                raise ToolArgumentError(f"Missing required argument '{path}'")
            continue
        clean[param.name] = _check_type(param, args[param.name], path)

    unknown = set(args) - {p.name for p in params}
    if unknown:
        logger.warning(f"Dropping undeclared arguments: {sorted(prefix + k for k in unknown)}")
    return clean


def validate_args(tool: ToolDef, args: Any) -> Dict[str, Any]:
    """Check args against the tool's declared schema, returning a normalized copy."""
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ToolArgumentError(f"Arguments for {tool.name.value} must be an object")
    return _validate_params(tool.params, args)


async def execute_tool(tool: ToolDef, args: Dict[str, Any], timeout: float = 15.0) -> ToolResult:
    """Run a tool with already-validated args.

    Handlers report their own failures in ToolResult.text; anything that
    escapes a handler, or a timeout, is raised to the caller.
    """
    name = tool.name.value
    arg_str = ", ".join(f"{k}={v!r}" for k, v in args.items() if k != "credentials")
    logger.info(f"Executing tool: {name}({arg_str})")
    t0 = time.monotonic()

    try:
        result = await asyncio.wait_for(tool.handler(**args), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Tool {name} timed out after {timeout:.0f}s")
        raise CollaboratorTimeout(f"Tool {name} timed out after {timeout:.0f}s")
    except Exception as e:
        logger.error(f"Tool {name} failed: {e}", exc_info=True)
        raise ToolExecutionError(sanitize_detail(f"Tool execution failed: {e}")) from e

    elapsed = time.monotonic() - t0
    logger.info(f"Tool {name}: {elapsed:.1f}s -> {'ok' if result.ok else 'failed'}")
    return result
