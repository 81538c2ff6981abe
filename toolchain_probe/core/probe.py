"""
Compiler probe — trial invocations of the C compiler on synthetic source.

The source text is fed through stdin (``-xc ... -``), object output goes to
the null device, and stdout + stderr are captured as one stream so the
policy layer can judge "silent success".  No state, no caching: every call
spawns exactly one compiler process.
"""
from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

logger = logging.getLogger(__name__)

BASELINE_SOURCE = "int main(){}\n"
EMPTY_SOURCE = "\n"
OPENMP_SOURCE = (
    "#ifdef _OPENMP\n"
    "#include <omp.h>\n"
    "#endif\n"
)


class Outcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one compiler invocation."""

    outcome: Outcome
    output: str                # combined stdout + stderr
    exit_code: int
    command: str

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def silent(self) -> bool:
        """True when the compiler printed nothing at all."""
        return self.output == ""


class CompilerProbe:
    """Runs the configured compiler command against source snippets."""

    def __init__(self, compiler: str, timeout: float = 60.0):
        self.compiler = compiler
        self.timeout = timeout
        self._argv0 = shlex.split(compiler)

    def run(self, args: Sequence[str], source: str) -> ProbeResult:
        """Spawn the compiler with *args*, feeding *source* on stdin."""
        cmd = self._argv0 + list(args)
        cmd_str = shlex.join(cmd)
        logger.debug("probe: %s", cmd_str)

        try:
            result = subprocess.run(
                cmd,
                input=source,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug("probe timed out after %ss: %s", self.timeout, cmd_str)
            return ProbeResult(
                outcome=Outcome.FAILURE,
                output=f"timed out after {self.timeout}s\n",
                exit_code=-1,
                command=cmd_str,
            )
        except OSError as e:
            # missing binary, not executable, ...
            logger.debug("probe could not start %s: %s", cmd_str, e)
            return ProbeResult(
                outcome=Outcome.FAILURE,
                output=f"{e}\n",
                exit_code=127,
                command=cmd_str,
            )

        if result.stdout:
            logger.debug("probe output:\n%s", result.stdout.rstrip())

        return ProbeResult(
            outcome=Outcome.SUCCESS if result.returncode == 0 else Outcome.FAILURE,
            output=result.stdout,
            exit_code=result.returncode,
            command=cmd_str,
        )

    # ── Canned probes ────────────────────────────────────────────────────

    def check_baseline(self) -> ProbeResult:
        """Compile and link ``int main(){}`` as C99."""
        return self.run(
            ["-xc", "-std=c99", "-o", os.devnull, "-"],
            BASELINE_SOURCE,
        )

    def try_flag(self, flag: str, prerequisite: Sequence[str] = ()) -> ProbeResult:
        """
        Compile an empty unit to assembly with *flag* (plus *prerequisite*).

        *flag* may hold several words (``-fp-model source``); it is split
        the same way the compiler command is.
        """
        args: List[str] = ["-xc", "-S", "-o", os.devnull]
        args += list(prerequisite)
        args += shlex.split(flag)
        args.append("-")
        return self.run(args, EMPTY_SOURCE)

    def expose_openmp(self, flags: Sequence[str]) -> ProbeResult:
        """Preprocess the conditional ``omp.h`` include with *flags*."""
        args: List[str] = ["-xc", "-E"]
        for f in flags:
            args += shlex.split(f)
        args.append("-")
        return self.run(args, OPENMP_SOURCE)
