"""
Probe runner — top-level orchestration: argv → probes → config.mk.

    resolve_options → baseline gate → SSE → OpenMP → auxiliary → emit

``run_configure`` performs one probe run for already-resolved Options and
returns the ResolvedConfig; ``main`` is the command-line entry point that
maps fatal errors to exit code 1.  Nothing is written unless every stage
succeeded.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from toolchain_probe.config import ProbeSettings
from toolchain_probe.core.builder import ConfigBuilder
from toolchain_probe.core.features import (
    apply_auxiliary,
    apply_base,
    apply_debug,
    apply_extras,
    apply_openmp,
    apply_sse,
    resolve_sse_mode,
)
from toolchain_probe.core.host import HostInfo, detect_host
from toolchain_probe.core.options import (
    OpenMPMode,
    Options,
    SseMode,
    format_help,
    resolve_options,
)
from toolchain_probe.core.probe import CompilerProbe
from toolchain_probe.errors import ProbeError, ToolchainError
from toolchain_probe.io.schema import ResolvedConfig
from toolchain_probe.io.version import read_version
from toolchain_probe.io.writer import ensure_writable, write_config
from toolchain_probe.policy.profile import Profile
from toolchain_probe.policy.verdict import Verdict, gate_compiler

logger = logging.getLogger(__name__)


def status(label: str, value: str) -> None:
    print(f"{label:>10}: {value}")


def run_configure(
    options: Options,
    settings: ProbeSettings,
    host: HostInfo | None = None,
    profile: Profile | None = None,
    config_path: Path | None = None,
) -> ResolvedConfig:
    """
    Probe the toolchain described by *options* and write config.mk.

    Parameters
    ----------
    options : Options
        Resolved command-line options.
    settings : ProbeSettings
        Timeout, version header and default output location.
    host : HostInfo, optional
        Build machine description.  Defaults to ``detect_host()``.
    profile : Profile, optional
        Flag profile.  Defaults to ``Profile.default()``.
    config_path : Path, optional
        Output file.  Defaults to ``settings.CONFIG_FILE``.

    Raises
    ------
    ProbeError
        Any fatal condition; no file is written in that case.
    """
    if profile is None:
        profile = Profile.default()
    if host is None:
        host = detect_host()
    if config_path is None:
        config_path = Path(settings.CONFIG_FILE)

    # ── Step 1: fail early on an unwritable config.mk ────────────────
    ensure_writable(config_path)

    # ── Step 2: baseline gate ────────────────────────────────────────
    probe = CompilerProbe(options.compiler, timeout=settings.PROBE_TIMEOUT)
    result = probe.check_baseline()
    verdict, reasons = gate_compiler(result)
    if verdict == Verdict.REJECT:
        logger.debug("baseline rejected (%s):\n%s", ", ".join(reasons), result.output)
        raise ToolchainError(
            f"{options.compiler} failed to compile anything "
            f"(make sure it's installed and supports C99)"
        )
    status("Compiler", options.compiler)

    builder = ConfigBuilder(compiler=options.compiler, math_library=profile.math_library)
    builder = apply_base(builder, options, profile)

    # ── Step 3: debug ────────────────────────────────────────────────
    builder = apply_debug(builder, options, profile)
    status("Debug", "yes" if options.debug else "no")

    # ── Step 4: SSE ──────────────────────────────────────────────────
    sse_mode = resolve_sse_mode(options.sse_mode, host, profile)
    builder = apply_sse(builder, probe, sse_mode, profile)
    status("SSE", "yes" if sse_mode == SseMode.ENABLED else "no")

    # ── Step 5: OpenMP ───────────────────────────────────────────────
    builder = apply_openmp(builder, probe, options.openmp_mode, profile)
    status("OpenMP", "no" if options.openmp_mode == OpenMPMode.NONE else "yes")

    # ── Step 6: auxiliary + user extras ──────────────────────────────
    builder = apply_auxiliary(builder, probe, profile)
    builder = apply_extras(builder, options)

    # ── Step 7: emit ─────────────────────────────────────────────────
    version = read_version(Path(settings.VERSION_HEADER), settings.VERSION_MACRO)
    config = ResolvedConfig.from_builder(builder, prefix=options.prefix, version=version)
    write_config(config, config_path)
    return config


def main(argv: Optional[List[str]] = None, settings: ProbeSettings | None = None) -> int:
    """Command-line entry point.  Returns the process exit code."""
    if argv is None:
        argv = sys.argv[1:]
    if settings is None:
        settings = ProbeSettings()

    try:
        options = resolve_options(argv, settings)
    except ProbeError as e:
        print(f"error: {e}")
        return 1

    if options.show_help:
        print(format_help())
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print()
    try:
        run_configure(options, settings)
    except ProbeError as e:
        status(e.label, f"error ... {e}")
        print()
        return 1
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
