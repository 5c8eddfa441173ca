"""
Execution adapter for wolframscript.

Source text is never placed on a command line. Each call writes its program to
a uniquely named temporary file, runs

    wolframscript -format <text|latex|mathematica> -file <path>

as a blocking subprocess, and removes the file again on every exit path.
"""

import logging
import random
import string
import subprocess
import threading
import time
from pathlib import Path
from typing import Optional, Set, Tuple, Union

from .config import BridgeConfig, OutputFormat
from .errors import EngineUnavailableError, ExecutionError

logger = logging.getLogger(__name__)

TEMP_PREFIX = "mcp_mathematica_"
TEMP_SUFFIX = ".wl"
CODE_PREVIEW_LENGTH = 100


def _preview(code: str) -> str:
    if len(code) > CODE_PREVIEW_LENGTH:
        return code[:CODE_PREVIEW_LENGTH] + "..."
    return code


def _random_suffix(length: int = 6) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


class WolframScriptEngine:
    """Runs Wolfram Language programs through the wolframscript CLI"""

    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig()
        self._live_files: Set[Path] = set()
        self._lock = threading.Lock()
        self._availability_cache: Optional[Tuple[float, bool]] = None

    # ------------------------------------------------------------------
    # Reachability
    # ------------------------------------------------------------------

    def _ping(self) -> bool:
        """Run ``wolframscript -help`` and report whether it succeeded."""
        try:
            result = subprocess.run(
                [self.config.wolframscript_path, "-help"],
                capture_output=True,
                text=True,
                timeout=self.config.availability_timeout
            )
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.warning("wolframscript not found or not accessible: %s", e)
            return False

        if result.returncode != 0:
            logger.warning(
                "wolframscript -help exited with status %d: %s",
                result.returncode, result.stderr.strip()
            )
            return False

        logger.debug("wolframscript installation verified")
        return True

    def is_available(self) -> bool:
        """
        Check whether wolframscript can be invoked at all.

        The check runs on every call unless ``availability_ttl`` is positive, in which
        case a result is reused for that many seconds.
        """
        ttl = self.config.availability_ttl
        if ttl and ttl > 0:
            with self._lock:
                cached = self._availability_cache
            if cached is not None and time.monotonic() - cached[0] < ttl:
                return cached[1]

        available = self._ping()

        if ttl and ttl > 0:
            with self._lock:
                self._availability_cache = (time.monotonic(), available)
        return available

    def ensure_available(self) -> None:
        """Raise EngineUnavailableError when the check fails."""
        if not self.is_available():
            raise EngineUnavailableError(
                "Mathematica (wolframscript) is not installed or not accessible. "
                "Please make sure Mathematica is installed and wolframscript is in "
                f"your PATH (looked for {self.config.wolframscript_path!r})."
            )

    # ------------------------------------------------------------------
    # Temporary program files
    # ------------------------------------------------------------------

    def _temp_path(self) -> Path:
        name = f"{TEMP_PREFIX}{int(time.time() * 1000)}_{_random_suffix()}{TEMP_SUFFIX}"
        return Path(self.config.temp_dir) / name

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete temporary file %s: %s", path, e)
        with self._lock:
            self._live_files.discard(path)

    @property
    def live_files(self) -> Set[Path]:
        """Temporary files belonging to calls that have not finished yet."""
        with self._lock:
            return set(self._live_files)

    def cleanup(self) -> int:
        """Remove any temporary files still tracked; returns how many there were."""
        paths = self.live_files
        for path in paths:
            self._remove(path)
        if paths:
            logger.info("Removed %d leftover temporary file(s)", len(paths))
        return len(paths)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def command(self, path: Union[str, Path], fmt: OutputFormat) -> list:
        return [
            self.config.wolframscript_path,
            "-format", fmt.value,
            "-file", str(path),
        ]

    def run(self, code: str, fmt: Union[OutputFormat, str, None] = OutputFormat.TEXT) -> str:
        """
        Execute Wolfram Language code and return its standard output, trimmed.

        Args:
            code: Program text, written verbatim to the temporary file
            fmt: Output format; unrecognised values fall back to text

        Raises:
            ExecutionError: wolframscript exited non-zero, timed out, or could
                not be started
        """
        fmt = OutputFormat.parse(fmt)
        path = self._temp_path()
        timeout = self.config.effective_timeout

        logger.info("Executing Mathematica code: %s", _preview(code))

        with self._lock:
            self._live_files.add(path)
        try:
            try:
                path.write_text(code, encoding="utf-8")
                result = subprocess.run(
                    self.command(path, fmt),
                    capture_output=True,
                    text=True,
                    timeout=timeout
                )
            except subprocess.TimeoutExpired:
                logger.error("wolframscript timed out after %ss", timeout)
                raise ExecutionError(f"wolframscript timed out after {timeout} seconds")
            except OSError as e:
                logger.error("Failed to run wolframscript: %s", e)
                raise ExecutionError(f"Failed to run wolframscript: {e}") from e

            if result.returncode != 0:
                detail = result.stderr.strip() or result.stdout.strip()
                if not detail:
                    detail = f"wolframscript exited with status {result.returncode}"
                logger.error(
                    "wolframscript exited with status %d: %s", result.returncode, detail
                )
                raise ExecutionError(
                    detail, stderr=result.stderr, returncode=result.returncode
                )

            if result.stderr.strip():
                logger.warning(
                    "Mathematica execution produced stderr output: %s",
                    result.stderr.strip()
                )

            logger.info("Mathematica execution completed successfully")
            return result.stdout.strip()
        finally:
            self._remove(path)
