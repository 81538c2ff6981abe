"""
ConfigBuilder — the flag accumulator handed from stage to stage.

Each stage files its flags under a ``FlagStage``; ``cflags()`` and
``ldflags()`` concatenate the stages in enum order, so precedence is fixed
by the enum and not by the order in which stages happen to run.  Builders
are immutable: every ``with_*`` returns a new one.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, Iterable, List, Tuple


class FlagStage(IntEnum):
    """Merge order of the emitted flags."""

    BASE = 0
    STANDARD = 1
    DEBUG = 2
    SSE = 3
    OPENMP = 4
    AUXILIARY = 5
    EXTRA = 6


Segments = Dict[FlagStage, Tuple[str, ...]]


@dataclass(frozen=True)
class ConfigBuilder:
    """Flags collected so far, per stage, for CFLAGS and LDFLAGS."""

    compiler: str
    cflag_segments: Segments = field(default_factory=dict)
    ldflag_segments: Segments = field(default_factory=dict)
    math_library: str = "-lm"

    @staticmethod
    def _extend(segments: Segments, stage: FlagStage, flags: Iterable[str]) -> Segments:
        merged = dict(segments)
        merged[stage] = merged.get(stage, ()) + tuple(flags)
        return merged

    def with_cflags(self, stage: FlagStage, flags: Iterable[str]) -> "ConfigBuilder":
        return replace(
            self, cflag_segments=self._extend(self.cflag_segments, stage, flags)
        )

    def with_ldflags(self, stage: FlagStage, flags: Iterable[str]) -> "ConfigBuilder":
        return replace(
            self, ldflag_segments=self._extend(self.ldflag_segments, stage, flags)
        )

    def with_flags(self, stage: FlagStage, flags: Iterable[str]) -> "ConfigBuilder":
        """Add the same flags to both CFLAGS and LDFLAGS."""
        flags = tuple(flags)
        return self.with_cflags(stage, flags).with_ldflags(stage, flags)

    @staticmethod
    def _flatten(segments: Segments) -> List[str]:
        out: List[str] = []
        for stage in sorted(segments):
            out.extend(segments[stage])
        return out

    def cflags(self) -> List[str]:
        return self._flatten(self.cflag_segments)

    def ldflags(self) -> List[str]:
        # libm after everything that uses it (Ubuntu's ld needs this)
        return self._flatten(self.ldflag_segments) + [self.math_library]
