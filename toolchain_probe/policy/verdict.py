"""
Verdict — ACCEPT / REJECT decisions over probe results, with reason enums.

Three judges:
  1. gate_compiler  — is the compiler usable at all?  (REJECT is fatal)
  2. judge_flag     — keep a soft flag?  (REJECT is silent)
  3. judge_openmp   — does the OpenMP runtime show up?  (REJECT is fatal
                      when OpenMP was requested)

Policy rules read the Profile but never spawn anything themselves.
"""
from enum import Enum, unique
from typing import List, Tuple

from toolchain_probe.core.probe import ProbeResult
from toolchain_probe.policy.profile import Profile


@unique
class Verdict(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


@unique
class CompilerRejectReason(str, Enum):
    NOT_RUNNABLE = "NOT_RUNNABLE"
    TIMEOUT = "TIMEOUT"
    COMPILE_FAILED = "COMPILE_FAILED"


@unique
class FlagRejectReason(str, Enum):
    DIAGNOSTIC_OUTPUT = "DIAGNOSTIC_OUTPUT"


@unique
class OpenMPRejectReason(str, Enum):
    RUNTIME_SYMBOL_MISSING = "RUNTIME_SYMBOL_MISSING"


def gate_compiler(result: ProbeResult) -> Tuple[Verdict, List[str]]:
    """Baseline check: the trivial C99 program must build."""
    if result.ok:
        return Verdict.ACCEPT, []
    if result.exit_code == 127:
        return Verdict.REJECT, [CompilerRejectReason.NOT_RUNNABLE.value]
    if result.exit_code == -1:
        return Verdict.REJECT, [CompilerRejectReason.TIMEOUT.value]
    return Verdict.REJECT, [CompilerRejectReason.COMPILE_FAILED.value]


def judge_flag(result: ProbeResult) -> Tuple[Verdict, List[str]]:
    """
    A soft flag is accepted only when the compiler prints nothing.

    Warnings reject just like errors, and the exit status is not looked
    at.  Relaxing this changes which optimization flags end up enabled.
    """
    if result.silent:
        return Verdict.ACCEPT, []
    return Verdict.REJECT, [FlagRejectReason.DIAGNOSTIC_OUTPUT.value]


def judge_openmp(result: ProbeResult, profile: Profile) -> Tuple[Verdict, List[str]]:
    """Accepting the flag is not enough: omp.h must actually expand."""
    if profile.openmp_runtime_symbol in result.output:
        return Verdict.ACCEPT, []
    return Verdict.REJECT, [OpenMPRejectReason.RUNTIME_SYMBOL_MISSING.value]
