import asyncio
from unittest.mock import MagicMock, patch

import pytest

from gcp_mcp.mcp_runtime import MCPServer, ToolResult, ToolSpec, call_tool


class FakeFastToolResult:
    def __init__(self, content, structured_content):
        self.content = content
        self.structured_content = structured_content


class FakeTool:
    model_fields = {"parameters": object()}

    def __init__(self, parameters=None):
        self.parameters = parameters

    def model_copy(self, update):
        return FakeTool(parameters=update["parameters"])


def test_mcp_server_registers_tools_on_fastmcp():
    fake_server = MagicMock()
    with patch("gcp_mcp.mcp_runtime.FastMCP", return_value=fake_server) as mock_fastmcp:
        with patch("gcp_mcp.mcp_runtime.FunctionTool") as mock_function_tool:
            mock_function_tool.from_function.return_value = MagicMock()
            server = MCPServer("name", "v1", "ins")
            server.add_tool(ToolSpec("t1", "d", {"properties": {"a": {}}}, lambda x: 1))

    mock_fastmcp.assert_called_once_with(name="name", version="v1", instructions="ins")
    assert server.tool_names == ["t1"]
    fake_server.add_tool.assert_called_once()
    kwargs = mock_function_tool.from_function.call_args.kwargs
    assert kwargs == {"name": "t1", "description": "d"}


def test_mcp_server_run_delegates():
    with patch("gcp_mcp.mcp_runtime.FastMCP"):
        server = MCPServer("name", "v1", "ins")
    server._server = MagicMock()
    server.run()
    server._server.run.assert_called_once_with()


def test_fastmcp_handler_filters_none_and_sets_parameters():
    captured = {"handler": None}

    def _from_function(handler, **kwargs):
        captured["handler"] = handler
        return FakeTool()

    fake_server = MagicMock()
    with patch("gcp_mcp.mcp_runtime.FastMCP", return_value=fake_server):
        with patch("gcp_mcp.mcp_runtime.FunctionTool") as mock_function_tool:
            with patch("gcp_mcp.mcp_runtime.FastToolResult", FakeFastToolResult):
                mock_function_tool.from_function.side_effect = _from_function
                server = MCPServer("name", "v1", "ins")

                async def _handler(payload):
                    return ToolResult(
                        content=[{"type": "text", "text": str(payload)}],
                        structured_content={"ok": True},
                    )

                schema = {"properties": {"a": {}, "b": {}}}
                server.add_tool(ToolSpec("my.tool", "desc", schema, _handler))

                handler = captured["handler"]
                assert handler.__name__ == "_handler_my_tool"
                assert list(handler.__signature__.parameters) == ["a", "b"]
                result = asyncio.run(handler(a=1, b=None))

    assert isinstance(result, FakeFastToolResult)
    assert result.content[0]["text"] == "{'a': 1}"
    assert result.structured_content == {"ok": True}
    registered = fake_server.add_tool.call_args.args[0]
    assert registered.parameters == schema


@pytest.mark.asyncio
async def test_call_tool_accepts_sync_and_async_handlers():
    sync_tool = ToolSpec("s", "d", {}, lambda payload: ToolResult(content=[], structured_content=payload))

    async def _async(payload):
        return ToolResult(content=[], structured_content={"async": True})

    async_tool = ToolSpec("a", "d", {}, _async)

    assert (await call_tool(sync_tool, {"x": 1})).structured_content == {"x": 1}
    assert (await call_tool(async_tool, {})).structured_content == {"async": True}


@pytest.mark.asyncio
async def test_call_tool_rejects_non_tool_result():
    tool = ToolSpec("bad", "d", {}, lambda payload: {"not": "a result"})
    with pytest.raises(TypeError, match="did not return ToolResult"):
        await call_tool(tool, {})
