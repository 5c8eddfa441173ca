"""
Mathematica MCP server.

Exposes two tools over MCP (stdio transport):
- execute_mathematica: run Wolfram Language code and return its output
- verify_derivation: check that consecutive derivation steps are equal

Both are answered by the local ``wolframscript`` executable; see
``wolfram_bridge.engine`` for how programs are handed over.

``tools/list`` and ``tools/call`` are answered straight from the
``ToolDispatcher``: its tool definitions are the listing, and the
``McpError`` it raises for unknown tools or malformed arguments goes back to
the client as a JSON-RPC error rather than a tool result.
"""

import asyncio
import atexit
import logging
import signal
import sys
from typing import Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .config import BridgeConfig
from .engine import WolframScriptEngine
from .tools import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "mathematica-server"


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server whose tool requests are handled by ``dispatcher``."""
    app: Server = Server(SERVER_NAME, version=__version__)

    async def handle_list_tools(request: types.ListToolsRequest) -> types.ServerResult:
        logger.info("Listing available tools")
        return types.ServerResult(types.ListToolsResult(tools=dispatcher.list_tools()))

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        # dispatcher calls block on subprocess.run
        response = await asyncio.to_thread(
            dispatcher.call_tool, request.params.name, request.params.arguments
        )
        return types.ServerResult(response.to_result())

    app.request_handlers[types.ListToolsRequest] = handle_list_tools
    app.request_handlers[types.CallToolRequest] = handle_call_tool
    return app


class BridgeServer:
    """Owns the engine, dispatcher and MCP app for the life of the process"""

    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig()
        self.engine = WolframScriptEngine(self.config)
        self.dispatcher = ToolDispatcher(self.engine)
        self.app = create_server(self.dispatcher)
        self._stopped = False

    def _signal_handler(self, signum, frame):
        """Handle termination signals gracefully."""
        logger.info("Received signal %d, shutting down", signum)
        self.stop()
        sys.exit(0)

    def install_signal_handlers(self) -> None:
        atexit.register(self.stop)
        if sys.platform != "win32":
            signal.signal(signal.SIGTERM, self._signal_handler)
            signal.signal(signal.SIGHUP, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    async def serve(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Mathematica MCP server running on stdio")
            await self.app.run(
                read_stream,
                write_stream,
                self.app.create_initialization_options(),
            )

    def start(self) -> None:
        """Serve MCP over stdio until the client disconnects or a signal arrives."""
        logger.info("Starting Mathematica MCP server %s", __version__)
        if self.engine.is_available():
            logger.info("Using wolframscript at %s", self.config.wolframscript_path)
        else:
            logger.warning(
                "wolframscript (%s) is not reachable; tool calls will report an error "
                "until it is installed", self.config.wolframscript_path
            )

        self.install_signal_handlers()
        try:
            asyncio.run(self.serve())
        finally:
            self.stop()

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        logger.info("Shutting down Mathematica MCP server")
        self.engine.cleanup()
