"""
Step-by-step derivation checking.

All steps are checked inside a single wolframscript run: the generated program
compares each step with the one before it using ``Simplify[prev == current]``
and builds the report text itself, so the host process never interprets any
mathematics.
"""

import logging
from typing import Any, Sequence, Union

from wolframclient.serializers import export

from .config import OutputFormat
from .engine import WolframScriptEngine
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MIN_STEPS = 2
REPORT_HEADER = "Derivation Verification Results:"


def validate_steps(steps: Any) -> list:
    """Return ``steps`` as a list of strings, or raise InvalidArgumentError."""
    if not isinstance(steps, (list, tuple)):
        raise InvalidArgumentError("At least two derivation steps are required")
    if len(steps) < MIN_STEPS:
        raise InvalidArgumentError("At least two steps are required for a derivation")
    if not all(isinstance(s, str) for s in steps):
        raise InvalidArgumentError("Every derivation step must be a string")
    return list(steps)


def wl_string_list(steps: Sequence[str]) -> str:
    """Wolfram Language list literal of strings, e.g. {"x", "x+1"}."""
    return export(list(steps)).decode("utf-8")


def build_verification_program(steps: Sequence[str]) -> str:
    """
    Build the Wolfram Language program that verifies ``steps``.

    For every adjacent pair the program records the step index, the original
    text, whether the pair simplifies to an identity, and the simplified form
    of the later step. The report it returns has one block per step:

        Step 2: (x-y)*(x+y)
          Valid: True
          Simplified: x^2 - y^2
    """
    steps = validate_steps(steps)
    return f'''
Module[{{steps, results, prev, current, report}},
  steps = {wl_string_list(steps)};
  results = {{}};

  (* Check if each step follows from the previous *)
  Do[
    prev = ToExpression[steps[[i - 1]]];
    current = ToExpression[steps[[i]]];
    AppendTo[results, <|
      "step" -> i,
      "expression" -> steps[[i]],
      "equivalent" -> Simplify[prev == current],
      "simplification" -> Simplify[current]
    |>],
    {{i, 2, Length[steps]}}
  ];

  report = "{REPORT_HEADER}\\n\\n";
  Do[
    report = report <>
      "Step " <> ToString[r["step"]] <> ": " <> r["expression"] <> "\\n" <>
      "  Valid: " <> ToString[r["equivalent"]] <> "\\n" <>
      "  Simplified: " <> ToString[r["simplification"], InputForm] <> "\\n\\n",
    {{r, results}}
  ];
  report
]
'''


class DerivationVerifier:
    """Checks a derivation with one wolframscript invocation"""

    def __init__(self, engine: WolframScriptEngine):
        self.engine = engine

    def verify(
        self,
        steps: Sequence[str],
        fmt: Union[OutputFormat, str, None] = OutputFormat.TEXT
    ) -> str:
        """
        Verify that each step is symbolically equal to the previous one.

        Raises:
            InvalidArgumentError: fewer than two steps, or a non-string step
            ExecutionError: the generated program failed to run
        """
        program = build_verification_program(steps)
        logger.info("Verifying mathematical derivation (%d steps)", len(steps))
        return self.engine.run(program, fmt)
