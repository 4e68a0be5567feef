"""Arithmetic tool — add two numbers."""
from ..registry import ToolDef, ToolName, ToolParam, ToolResult


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


async def add_two_numbers(a: float, b: float, **kwargs) -> ToolResult:
    total = a + b
    return ToolResult(
        text=f"The sum of {_format_number(a)} and {_format_number(b)} is {_format_number(total)}"
    )


def make_add_tool() -> ToolDef:
    return ToolDef(
        name=ToolName.ADD_TWO_NUMBERS,
        description="Add two numbers",
        params=[
            ToolParam("a", type="number", description="first addend"),
            ToolParam("b", type="number", description="second addend"),
        ],
        handler=add_two_numbers,
    )
