"""
Tool registry and dispatcher.

The two tools are declared here as static data. ``ToolDispatcher`` resolves a
tool name, validates its arguments, checks that wolframscript is reachable and
runs the operation, turning engine failures into error-flagged responses so a
single bad input never takes the server down.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolResult,
    ErrorData,
    TextContent,
    Tool,
)

from .config import OutputFormat
from .derivation import DerivationVerifier, validate_steps
from .engine import WolframScriptEngine
from .errors import EngineUnavailableError, ExecutionError, InvalidArgumentError

logger = logging.getLogger(__name__)

EXECUTE_MATHEMATICA = "execute_mathematica"
VERIFY_DERIVATION = "verify_derivation"

FORMAT_SCHEMA = {
    "type": "string",
    "description": "Output format (text, latex, or mathematica)",
    "enum": [f.value for f in OutputFormat],
    "default": OutputFormat.TEXT.value,
}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": EXECUTE_MATHEMATICA,
        "description": "Execute Mathematica code and return the result",
        "inputSchema": {
            "type": "object",
            "properties": {
                "code": {
                    "type": "string",
                    "description": "Mathematica code to execute",
                },
                "format": FORMAT_SCHEMA,
            },
            "required": ["code"],
        },
    },
    {
        "name": VERIFY_DERIVATION,
        "description": "Verify a mathematical derivation step by step",
        "inputSchema": {
            "type": "object",
            "properties": {
                "steps": {
                    "type": "array",
                    "description": "Array of mathematical expressions representing "
                                   "steps in a derivation",
                    "items": {"type": "string"},
                },
                "format": FORMAT_SCHEMA,
            },
            "required": ["steps"],
        },
    },
]


@dataclass
class ToolResponse:
    """Text result of a tool call, optionally flagged as an error"""
    text: str
    is_error: bool = False

    def to_content(self) -> List[TextContent]:
        return [TextContent(type="text", text=self.text)]

    def to_result(self) -> CallToolResult:
        return CallToolResult(content=self.to_content(), isError=self.is_error)


def _protocol_error(code: int, message: str) -> McpError:
    return McpError(ErrorData(code=code, message=message))


class ToolDispatcher:
    """Maps tool calls onto the execution engine"""

    def __init__(
        self,
        engine: WolframScriptEngine,
        verifier: Optional[DerivationVerifier] = None
    ):
        self.engine = engine
        self.verifier = verifier or DerivationVerifier(engine)
        self._handlers = {
            EXECUTE_MATHEMATICA: self._execute_mathematica,
            VERIFY_DERIVATION: self._verify_derivation,
        }

    def list_tools(self) -> List[Tool]:
        logger.debug("Listing available tools")
        return [Tool(**definition) for definition in TOOL_DEFINITIONS]

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """
        Run one tool call.

        Unknown names and malformed arguments raise ``McpError`` before any
        subprocess is started. An unreachable engine or a failed run comes back
        as a ``ToolResponse`` with ``is_error`` set.
        """
        handler = self._handlers.get(name)
        if handler is None:
            logger.error("Unknown tool: %s", name)
            raise _protocol_error(METHOD_NOT_FOUND, f"Unknown tool: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise _protocol_error(INVALID_PARAMS, "Tool arguments must be an object")
        fmt = OutputFormat.parse(arguments.get("format"))

        try:
            payload = self._validate(name, arguments)
        except InvalidArgumentError as e:
            raise _protocol_error(INVALID_PARAMS, str(e)) from e

        try:
            self.engine.ensure_available()
        except EngineUnavailableError as e:
            return ToolResponse(f"Error: {e}", is_error=True)

        logger.info("Executing %s tool", name)
        try:
            return handler(payload, fmt)
        except Exception as e:
            logger.exception("Unexpected failure in %s", name)
            raise _protocol_error(INTERNAL_ERROR, f"Unexpected error in {name}: {e}") from e

    def _validate(self, name: str, arguments: Dict[str, Any]) -> Any:
        if name == EXECUTE_MATHEMATICA:
            code = arguments.get("code")
            if not isinstance(code, str) or not code:
                raise InvalidArgumentError("Mathematica code is required")
            return code
        return validate_steps(arguments.get("steps"))

    def _execute_mathematica(self, code: str, fmt: OutputFormat) -> ToolResponse:
        try:
            return ToolResponse(self.engine.run(code, fmt))
        except ExecutionError as e:
            logger.error("Tool execution failed: %s", e)
            return ToolResponse(f"Error executing Mathematica code: {e}", is_error=True)

    def _verify_derivation(self, steps: List[str], fmt: OutputFormat) -> ToolResponse:
        try:
            return ToolResponse(self.verifier.verify(steps, fmt))
        except ExecutionError as e:
            logger.error("Tool execution failed: %s", e)
            return ToolResponse(f"Error verifying derivation: {e}", is_error=True)
