"""
Integration tests against a real wolframscript installation.

Skipped unless wolframscript is on PATH.

Run with: pytest wolfram_bridge/tests/test_wolframscript_integration.py -v
"""

import shutil

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS

from wolfram_bridge import BridgeConfig, ToolDispatcher, WolframScriptEngine

WOLFRAMSCRIPT = shutil.which("wolframscript")

pytestmark = pytest.mark.skipif(WOLFRAMSCRIPT is None, reason="wolframscript not installed")


@pytest.fixture
def dispatcher(work_dir) -> ToolDispatcher:
    config = BridgeConfig(wolframscript_path=WOLFRAMSCRIPT, temp_dir=str(work_dir), timeout=120)
    return ToolDispatcher(WolframScriptEngine(config))


def test_simple_calculation(dispatcher, work_dir):
    response = dispatcher.call_tool("execute_mathematica", {"code": "2 + 2", "format": "text"})
    assert not response.is_error
    assert response.text.strip() == "4"
    assert list(work_dir.iterdir()) == []


def test_integral(dispatcher):
    response = dispatcher.call_tool("execute_mathematica", {"code": "Integrate[x^2, x]"})
    assert response.text == "x^3/3"


def test_malformed_code(dispatcher, work_dir):
    response = dispatcher.call_tool("execute_mathematica", {"code": "2 + "})
    assert response.is_error
    assert response.text
    assert list(work_dir.iterdir()) == []


def test_equivalent_steps(dispatcher):
    response = dispatcher.call_tool(
        "verify_derivation", {"steps": ["x^2 - y^2", "(x-y)*(x+y)"]}
    )
    assert not response.is_error
    assert "Step 2:" in response.text
    assert "Valid: True" in response.text


def test_non_equivalent_steps(dispatcher):
    response = dispatcher.call_tool("verify_derivation", {"steps": ["x", "x+1"]})
    assert "Valid: False" in response.text


def test_short_derivation(dispatcher, work_dir):
    with pytest.raises(McpError) as exc_info:
        dispatcher.call_tool("verify_derivation", {"steps": ["x"]})
    assert exc_info.value.error.code == INVALID_PARAMS
