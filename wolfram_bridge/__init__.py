"""
Wolfram Bridge

An MCP server that runs Mathematica code through a local ``wolframscript``
installation, for checking derivations and producing LaTeX from LLM clients.

Main Modules
------------
engine
    Execution adapter: temporary program files and the wolframscript subprocess.

derivation
    Builds a single Wolfram program that checks consecutive steps for equality.

tools
    Tool registry (schemas) and dispatcher.

server
    MCP request handlers and process lifecycle.

Example Usage
-------------
>>> from wolfram_bridge import BridgeConfig, WolframScriptEngine
>>> engine = WolframScriptEngine(BridgeConfig())
>>> engine.run("Integrate[x^2, x]")
'x^3/3'
"""

__version__ = "0.2.0"

from .config import BridgeConfig, OutputFormat
from .errors import (
    BridgeError,
    InvalidArgumentError,
    EngineUnavailableError,
    ExecutionError,
)
from .engine import WolframScriptEngine
from .derivation import DerivationVerifier, build_verification_program
from .tools import ToolDispatcher, ToolResponse, TOOL_DEFINITIONS
from .server import BridgeServer, create_server

__all__ = [
    # Configuration
    "BridgeConfig",
    "OutputFormat",
    # Errors
    "BridgeError",
    "InvalidArgumentError",
    "EngineUnavailableError",
    "ExecutionError",
    # Execution
    "WolframScriptEngine",
    "DerivationVerifier",
    "build_verification_program",
    # MCP surface
    "ToolDispatcher",
    "ToolResponse",
    "TOOL_DEFINITIONS",
    "BridgeServer",
    "create_server",
]
