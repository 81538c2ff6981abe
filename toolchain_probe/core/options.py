"""
Options — command-line tokens + environment → one immutable Options value.

Accepts configure-style tokens: ``--switch``, ``--switch=value`` and bare
``KEY=value`` overrides for CC / CFLAGS / LDFLAGS.  The overrides can also
come from the environment (``ProbeSettings``); any CLI occurrence wins, and
a later CLI occurrence wins over an earlier one.
"""
from __future__ import annotations

import argparse
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from toolchain_probe import DEFAULT_COMPILER, DEFAULT_PREFIX
from toolchain_probe.config import ProbeSettings
from toolchain_probe.errors import UsageError

_OVERRIDE_RE = re.compile(r"^(CC|CFLAGS|LDFLAGS)=(.*)$", re.DOTALL)
# value only as --switch=value; a bare switch would swallow the next token
_VALUE_SWITCHES = ("--prefix", "--extra-cflags", "--extra-ldflags")


class SseMode(str, Enum):
    AUTO = "auto"
    ENABLED = "enabled"
    DISABLED = "disabled"


class OpenMPMode(str, Enum):
    NONE = "none"
    DYNAMIC = "dynamic"
    STATIC = "static"


@dataclass(frozen=True)
class Options:
    """Resolved invocation options.  Never mutated once probing starts."""

    prefix: str = DEFAULT_PREFIX
    compiler: str = DEFAULT_COMPILER
    user_cflags: Optional[str] = None
    user_ldflags: Optional[str] = None
    debug: bool = False
    sse_mode: SseMode = SseMode.AUTO
    openmp_mode: OpenMPMode = OpenMPMode.NONE
    extra_cflags: Tuple[str, ...] = ()
    extra_ldflags: Tuple[str, ...] = ()
    verbose: bool = False
    show_help: bool = False


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that reports problems as UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="configure",
        description="Probe the C toolchain and write config.mk",
        usage="%(prog)s [options] [CC=<compiler>] [CFLAGS=<flags>] [LDFLAGS=<flags>]",
        epilog=(
            "overrides:\n"
            "  CC=<compiler>         use given compiler command\n"
            "  CFLAGS=<flags>        pass options to the compiler\n"
            "  LDFLAGS=<flags>       pass options to the linker\n"
            "\nCC, CFLAGS and LDFLAGS may also be set in the environment."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--help",
        dest="show_help",
        action="store_true",
        help="show this help and exit",
    )
    parser.add_argument(
        "--prefix",
        metavar="<dir>",
        default=DEFAULT_PREFIX,
        help=f"installation directory [{DEFAULT_PREFIX}]",
    )
    # can be used multiple times or in quotes to set multiple flags
    parser.add_argument(
        "--extra-cflags",
        metavar="<flags>",
        action="append",
        default=[],
        help="append to CFLAGS",
    )
    parser.add_argument(
        "--extra-ldflags",
        metavar="<flags>",
        action="append",
        default=[],
        help="append to LDFLAGS",
    )
    parser.add_argument(
        "--enable-debug",
        dest="debug",
        action="store_true",
        help="compile with -g instead of -DNDEBUG",
    )
    parser.add_argument(
        "--enable-sse",
        dest="sse_mode",
        action="store_const",
        const=SseMode.ENABLED,
        default=SseMode.AUTO,
        help="enable SSE instructions",
    )
    parser.add_argument(
        "--disable-sse",
        dest="sse_mode",
        action="store_const",
        const=SseMode.DISABLED,
        help="disable SSE instructions",
    )
    parser.add_argument(
        "--with-openmp",
        dest="openmp_mode",
        action="store_const",
        const=OpenMPMode.DYNAMIC,
        default=OpenMPMode.NONE,
        help="compile with multicore support",
    )
    # Exact-match option string: argparse looks up the whole token before
    # splitting on "=", so this never collides with --with-openmp.
    parser.add_argument(
        "--with-openmp=static",
        dest="openmp_mode",
        action="store_const",
        const=OpenMPMode.STATIC,
        help="multicore support with static libgomp",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="log every compiler invocation",
    )
    return parser


def _switch_name(token: str) -> str:
    return token.split("=", 1)[0]


def resolve_options(
    argv: Sequence[str],
    settings: ProbeSettings | None = None,
) -> Options:
    """
    Interpret *argv* on top of *settings*.

    Raises
    ------
    UsageError
        For any token that is neither a known switch nor a KEY=value override,
        or for a value switch given without ``=<value>``.
    """
    if settings is None:
        settings = ProbeSettings()

    for token in argv:
        if token in _VALUE_SWITCHES:
            raise UsageError(f"switch {token} needs a value ({token}=<value>)")

    parser = build_parser()
    args, leftovers = parser.parse_known_args(list(argv))

    overrides = {
        "CC": settings.CC,
        "CFLAGS": settings.CFLAGS,
        "LDFLAGS": settings.LDFLAGS,
    }
    unknown: List[str] = []
    for token in leftovers:
        m = _OVERRIDE_RE.match(token)
        if m:
            overrides[m.group(1)] = m.group(2)
        else:
            unknown.append(token)

    if unknown:
        raise UsageError(
            f"unknown switch {_switch_name(unknown[0])} "
            f"(see --help for the list)"
        )

    return Options(
        prefix=args.prefix,
        # empty counts as unset, like ${CC:-gcc}
        compiler=overrides["CC"] or DEFAULT_COMPILER,
        user_cflags=overrides["CFLAGS"] or None,
        user_ldflags=overrides["LDFLAGS"] or None,
        debug=args.debug,
        sse_mode=args.sse_mode,
        openmp_mode=args.openmp_mode,
        extra_cflags=tuple(args.extra_cflags),
        extra_ldflags=tuple(args.extra_ldflags),
        verbose=args.verbose,
        show_help=args.show_help,
    )


def format_help() -> str:
    return build_parser().format_help()
