"""
Feature resolution — SSE, OpenMP and auxiliary tuning flags.

Every ``apply_*`` function takes a ConfigBuilder and returns a new one.
Probing goes through CompilerProbe; accept/reject decisions go through
policy.verdict.  Soft flags that are rejected simply do not appear.
"""
from __future__ import annotations

import logging
import re
import shlex
from typing import Iterable, List

from toolchain_probe.core.builder import ConfigBuilder, FlagStage
from toolchain_probe.core.host import HostInfo
from toolchain_probe.core.options import OpenMPMode, Options, SseMode
from toolchain_probe.core.probe import CompilerProbe
from toolchain_probe.errors import FeatureError
from toolchain_probe.policy.profile import Profile, SoftFlag
from toolchain_probe.policy.verdict import Verdict, judge_flag, judge_openmp

logger = logging.getLogger(__name__)


# ── Soft flags ───────────────────────────────────────────────────────────────

def accepted_soft_flags(probe: CompilerProbe, candidates: Iterable[SoftFlag]) -> List[str]:
    """Probe each candidate in order and keep the silently accepted ones."""
    kept: List[str] = []
    for sf in candidates:
        result = probe.try_flag(sf.flag, sf.prerequisite)
        verdict, reasons = judge_flag(result)
        if verdict == Verdict.ACCEPT:
            kept.append(sf.flag)
        else:
            logger.debug("soft flag %s rejected: %s", sf.flag, ", ".join(reasons))
    return kept


# ── Base / debug / extras ────────────────────────────────────────────────────

def apply_base(builder: ConfigBuilder, options: Options, profile: Profile) -> ConfigBuilder:
    """User CFLAGS/LDFLAGS replace the profile base; -std and -I always follow."""
    if options.user_cflags:
        builder = builder.with_cflags(FlagStage.BASE, [options.user_cflags])
    else:
        builder = builder.with_cflags(FlagStage.BASE, profile.base_cflags)
    if options.user_ldflags:
        builder = builder.with_ldflags(FlagStage.BASE, [options.user_ldflags])
    return builder.with_cflags(FlagStage.STANDARD, profile.standard_cflags)


def apply_debug(builder: ConfigBuilder, options: Options, profile: Profile) -> ConfigBuilder:
    flags = profile.debug_cflags if options.debug else profile.release_cflags
    return builder.with_cflags(FlagStage.DEBUG, flags)


def apply_extras(builder: ConfigBuilder, options: Options) -> ConfigBuilder:
    """User fragments go in verbatim, after everything the probe chose."""
    return builder.with_cflags(FlagStage.EXTRA, options.extra_cflags).with_ldflags(
        FlagStage.EXTRA, options.extra_ldflags
    )


# ── SSE ──────────────────────────────────────────────────────────────────────

def resolve_sse_mode(mode: SseMode, host: HostInfo, profile: Profile) -> SseMode:
    """
    Turn AUTO into ENABLED or DISABLED.

    A 64-bit x86 architecture string settles it; otherwise the CPU
    descriptor's flags line is searched for the SSE token.
    """
    if mode != SseMode.AUTO:
        return mode
    if re.search(profile.sse_arch_pattern, host.arch):
        logger.debug("SSE: architecture %s is x86-64", host.arch)
        return SseMode.ENABLED
    if profile.sse_cpu_token in host.cpu_flags():
        logger.debug("SSE: found %r in CPU flags", profile.sse_cpu_token)
        return SseMode.ENABLED
    return SseMode.DISABLED


def apply_sse(
    builder: ConfigBuilder,
    probe: CompilerProbe,
    mode: SseMode,
    profile: Profile,
) -> ConfigBuilder:
    if mode == SseMode.AUTO:
        raise ValueError("SSE mode must be resolved before applying flags")

    if mode == SseMode.ENABLED:
        flags = list(profile.sse_enabled_cflags)
        flags += accepted_soft_flags(probe, profile.sse_soft_flags)
    else:
        flags = list(profile.sse_disabled_cflags)
    return builder.with_cflags(FlagStage.SSE, flags)


# ── OpenMP ───────────────────────────────────────────────────────────────────

def openmp_flag_set(mode: OpenMPMode, profile: Profile) -> List[str]:
    if mode == OpenMPMode.STATIC:
        return list(profile.openmp_static_flags)
    if mode == OpenMPMode.DYNAMIC:
        return list(profile.openmp_dynamic_flags)
    return []


def apply_openmp(
    builder: ConfigBuilder,
    probe: CompilerProbe,
    mode: OpenMPMode,
    profile: Profile,
) -> ConfigBuilder:
    """
    Requested OpenMP must work or the run fails; unrequested OpenMP only
    silences pragma warnings.

    Raises
    ------
    FeatureError
        If the compiler does not expose the OpenMP runtime with the flags.
    """
    if mode == OpenMPMode.NONE:
        flags = list(profile.no_openmp_cflags)
        flags += accepted_soft_flags(probe, profile.no_openmp_soft_flags)
        return builder.with_cflags(FlagStage.OPENMP, flags)

    flags = openmp_flag_set(mode, profile)
    result = probe.expose_openmp(flags)
    verdict, reasons = judge_openmp(result, profile)
    if verdict != Verdict.ACCEPT:
        logger.debug("OpenMP rejected (%s): %s", ", ".join(reasons), shlex.join(flags))
        raise FeatureError(
            "not supported by compiler (please install a compiler that "
            "supports OpenMP (e.g. gcc) and specify it with the CC= argument)",
            label="OpenMP",
        )
    return builder.with_flags(FlagStage.OPENMP, flags)


# ── Auxiliary ────────────────────────────────────────────────────────────────

def apply_auxiliary(
    builder: ConfigBuilder,
    probe: CompilerProbe,
    profile: Profile,
) -> ConfigBuilder:
    return builder.with_cflags(
        FlagStage.AUXILIARY, accepted_soft_flags(probe, profile.auxiliary_flags)
    )
