"""Tool system — registry, classifier, executor."""
from typing import Optional

from .registry import ToolDef, ToolName, ToolParam, ToolRegistry, ToolResult
from .router import should_use_tools, matched_domains
from .executor import execute_tool, validate_args
from .builtin import (
    DictionaryClient,
    SocialPoster,
    make_add_tool,
    make_define_tool,
    make_post_tool,
)


def build_registry(dictionary: Optional[DictionaryClient] = None,
                   poster: Optional[SocialPoster] = None) -> ToolRegistry:
    """Build the frozen catalog of builtin tools."""
    registry = ToolRegistry([
        make_add_tool(),
        make_post_tool(poster or SocialPoster()),
        make_define_tool(dictionary or DictionaryClient()),
    ])
    return registry.freeze()
