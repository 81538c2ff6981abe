"""
Host introspection — CPU architecture and the kernel's CPU feature line.
"""
from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CPUINFO_PATH = Path("/proc/cpuinfo")


@dataclass(frozen=True)
class HostInfo:
    """What the probe knows about the build machine."""

    arch: str
    cpuinfo_path: Path = field(default=CPUINFO_PATH)

    def cpu_flags(self) -> str:
        """
        First ``flags`` line of the CPU descriptor, or "" when the
        descriptor is absent (non-Linux hosts) or has no such line.
        """
        try:
            with open(self.cpuinfo_path, "r", errors="replace") as f:
                for line in f:
                    if line.startswith("flags"):
                        return line.rstrip("\n")
        except OSError as e:
            logger.debug("cannot read %s: %s", self.cpuinfo_path, e)
        return ""


def detect_host() -> HostInfo:
    """Describe the machine this process runs on."""
    return HostInfo(arch=platform.machine())
