"""MCP runtime adapter over FastMCP."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, cast

from fastmcp import FastMCP
from fastmcp.tools import FunctionTool
from fastmcp.tools.tool import ToolResult as FastToolResult
from pydantic import BaseModel

logger = logging.getLogger(__name__)


@dataclass
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, object]
    handler: Callable[[dict[str, object]], "ToolResult | Awaitable[ToolResult]"]


class ToolResult(BaseModel):
    content: list[dict[str, object]]
    structured_content: dict[str, object] | None = None


class MCPServer:
    """Registers ``ToolSpec`` handlers on a FastMCP server."""

    def __init__(self, name: str, version: str, instructions: str) -> None:
        self._server: Any = FastMCP(name=name, version=version, instructions=instructions)
        self._tools: dict[str, ToolSpec] = {}

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def add_tool(self, tool: ToolSpec) -> None:
        self._tools[tool.name] = tool
        self._server.add_tool(_to_fastmcp_tool(tool))

    def run(self) -> None:
        self._server.run()


def _to_fastmcp_tool(tool: ToolSpec) -> Any:
    # Build a closure-based handler with a synthetic signature so FastMCP
    # sees named parameters without resorting to exec()/eval().
    raw_properties = tool.input_schema.get("properties", {})
    properties = raw_properties if isinstance(raw_properties, dict) else {}
    prop_names = [name for name in properties.keys() if isinstance(name, str)]

    async def _handler(**kwargs: object) -> object:
        filtered = {k: v for k, v in kwargs.items() if v is not None}
        result = await call_tool(tool, filtered)
        return FastToolResult(
            content=result.content,
            structured_content=result.structured_content,
        )

    params = [
        inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=None, annotation=object)
        for name in prop_names
    ]
    _handler.__signature__ = inspect.Signature(params)  # type: ignore[attr-defined]
    safe_name = tool.name.replace("-", "_").replace(".", "_")
    _handler.__name__ = f"_handler_{safe_name}"

    fast_tool = FunctionTool.from_function(
        _handler,
        name=tool.name,
        description=tool.description,
    )
    fields = getattr(fast_tool.__class__, "model_fields", None)
    if isinstance(fields, dict) and "parameters" in fields:
        fast_tool = fast_tool.model_copy(update={"parameters": tool.input_schema})
    return fast_tool


async def call_tool(tool: ToolSpec, arguments: dict[str, object]) -> ToolResult:
    raw_result = tool.handler(arguments)
    if inspect.isawaitable(raw_result):
        result = await cast(Awaitable[ToolResult], raw_result)
    else:
        result = cast(ToolResult, raw_result)
    if not isinstance(result, ToolResult):
        raise TypeError("Tool handler did not return ToolResult")
    return result
