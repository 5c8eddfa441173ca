"""
Configuration for the Mathematica bridge.

Every setting can be supplied through the environment, so the server can be
configured from an MCP client's ``env`` block without extra CLI flags:

    WOLFRAMSCRIPT_PATH       path to the wolframscript executable
    WOLFRAM_EVAL_TIMEOUT     seconds before a call is killed (0 = no limit)
    WOLFRAM_AVAILABILITY_TIMEOUT    seconds allowed for the reachability check
    WOLFRAM_AVAILABILITY_TTL        seconds to reuse a reachability result (0 = check on every call)
    WOLFRAM_BRIDGE_TMPDIR    directory for temporary program files
    WOLFRAM_BRIDGE_LOG_LEVEL logging level for the CLI
"""

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


DEFAULT_EVAL_TIMEOUT = 300
DEFAULT_AVAILABILITY_TIMEOUT = 10


class OutputFormat(Enum):
    """Output rendering modes understood by wolframscript's -format flag"""
    TEXT = "text"
    LATEX = "latex"
    MATHEMATICA = "mathematica"

    @classmethod
    def parse(cls, value: Any) -> "OutputFormat":
        """Parse a format name, falling back to TEXT for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.TEXT


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class BridgeConfig:
    """Configuration for the wolframscript bridge."""

    # Executable used for both real calls and the reachability check
    wolframscript_path: str = field(default_factory=lambda: os.environ.get(
        "WOLFRAMSCRIPT_PATH", "wolframscript"
    ))

    # Wall-clock limit per call; 0 or negative disables it
    timeout: float = field(default_factory=lambda: _env_float(
        "WOLFRAM_EVAL_TIMEOUT", DEFAULT_EVAL_TIMEOUT
    ))

    availability_timeout: float = field(default_factory=lambda: _env_float(
        "WOLFRAM_AVAILABILITY_TIMEOUT", DEFAULT_AVAILABILITY_TIMEOUT
    ))

    # Reuse a reachability result for this many seconds (0 = check on every call)
    availability_ttl: float = field(default_factory=lambda: _env_float(
        "WOLFRAM_AVAILABILITY_TTL", 0
    ))

    temp_dir: str = field(default_factory=lambda: os.environ.get(
        "WOLFRAM_BRIDGE_TMPDIR", tempfile.gettempdir()
    ))

    log_level: str = field(default_factory=lambda: os.environ.get(
        "WOLFRAM_BRIDGE_LOG_LEVEL", "INFO"
    ).upper())

    @property
    def effective_timeout(self) -> Optional[float]:
        """Timeout to hand to subprocess.run, or None when disabled."""
        return self.timeout if self.timeout and self.timeout > 0 else None
