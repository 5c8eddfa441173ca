"""
Shared fixtures: a fake ``wolframscript`` executable.

The fake appends one JSON line per invocation to ``$FAKE_WOLFRAM_LOG`` (its
arguments and the contents of the ``-file`` it was given) and answers a few
canned programs:

    2 + 2        -> prints 4
    ... +        -> syntax error on stderr, exit status 1
    $format      -> prints the value passed to -format
    anything containing FAIL  -> "boom" on stderr, exit status 2
    anything containing Warn  -> prints ok, writes a warning on stderr
    anything containing Pause -> sleeps for 5 seconds
    anything else             -> echoes the program back
"""

import json
import sys
from pathlib import Path

import pytest

from wolfram_bridge import BridgeConfig

FAKE_WOLFRAMSCRIPT = '''#!@PYTHON@
import json
import os
import sys
import time

args = sys.argv[1:]
record = {"args": args}
source = None
if "-file" in args:
    path = args[args.index("-file") + 1]
    record["file"] = path
    with open(path, encoding="utf-8") as f:
        source = f.read()
    record["source"] = source

log = os.environ.get("FAKE_WOLFRAM_LOG")
if log:
    with open(log, "a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\\n")

if "-help" in args:
    print("OPTIONS:")
    sys.exit(int(os.environ.get("FAKE_WOLFRAM_HELP_STATUS", "0")))

fmt = args[args.index("-format") + 1] if "-format" in args else "text"
code = (source or "").strip()

if code == "2 + 2":
    print("4")
elif code == "$format":
    print(fmt)
elif code.endswith("+"):
    sys.stderr.write("Syntax::sntxi: Incomplete expression; more input is needed.\\n")
    sys.exit(1)
elif "FAIL" in code:
    sys.stderr.write("boom\\n")
    sys.exit(2)
elif "Warn" in code:
    sys.stderr.write("General::warn: something odd happened\\n")
    print("ok")
elif "Pause" in code:
    time.sleep(5)
    print("late")
else:
    print(code)
'''


class FakeWolframScript:
    """Handle on the fake executable and its invocation log"""

    def __init__(self, path: Path, log: Path):
        self.path = path
        self.log = log

    def calls(self) -> list:
        if not self.log.exists():
            return []
        with open(self.log, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def runs(self) -> list:
        """Invocations that executed a program (excludes -help calls)."""
        return [c for c in self.calls() if "-file" in c["args"]]

    def help_calls(self) -> list:
        return [c for c in self.calls() if "-help" in c["args"]]


@pytest.fixture
def fake_wolframscript(tmp_path, monkeypatch) -> FakeWolframScript:
    script = tmp_path / "bin" / "wolframscript"
    script.parent.mkdir()
    script.write_text(FAKE_WOLFRAMSCRIPT.replace("@PYTHON@", sys.executable))
    script.chmod(0o755)

    log = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_WOLFRAM_LOG", str(log))
    monkeypatch.delenv("FAKE_WOLFRAM_HELP_STATUS", raising=False)
    return FakeWolframScript(script, log)


@pytest.fixture
def work_dir(tmp_path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def config(fake_wolframscript, work_dir) -> BridgeConfig:
    return BridgeConfig(
        wolframscript_path=str(fake_wolframscript.path),
        timeout=30,
        availability_timeout=10,
        availability_ttl=0,
        temp_dir=str(work_dir),
    )
