"""Error types raised by the bridge."""

from typing import Optional


class BridgeError(Exception):
    """Base class for all bridge errors"""


class InvalidArgumentError(BridgeError, ValueError):
    """Caller input is malformed; raised before any subprocess is spawned"""


class EngineUnavailableError(BridgeError):
    """wolframscript is not installed or not on the execution path"""


class ExecutionError(BridgeError):
    """wolframscript ran but failed, or could not be spawned at all"""

    def __init__(
        self,
        message: str,
        stderr: Optional[str] = None,
        returncode: Optional[int] = None
    ):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode
