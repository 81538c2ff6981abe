"""
Profile — every flag literal the probe can emit or test.

Core probing logic holds no flag strings of its own.  Supporting another
compiler quirk is a profile change, not a code change.
"""
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class SoftFlag:
    """A flag kept only if the compiler accepts it silently."""

    flag: str
    prerequisite: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Profile:
    """Flag sets, in the groups the config merge order refers to."""

    # Identity
    profile_id: str

    # Base / language standard / debug
    base_cflags: List[str] = field(default_factory=list)
    standard_cflags: List[str] = field(default_factory=list)
    debug_cflags: List[str] = field(default_factory=list)
    release_cflags: List[str] = field(default_factory=list)

    # SSE
    sse_enabled_cflags: List[str] = field(default_factory=list)
    sse_soft_flags: List[SoftFlag] = field(default_factory=list)
    sse_disabled_cflags: List[str] = field(default_factory=list)
    sse_arch_pattern: str = r"(amd|x86_)64"
    sse_cpu_token: str = "sse"

    # OpenMP
    openmp_dynamic_flags: List[str] = field(default_factory=list)
    openmp_static_flags: List[str] = field(default_factory=list)
    openmp_runtime_symbol: str = "omp_get_thread_num"
    no_openmp_cflags: List[str] = field(default_factory=list)
    no_openmp_soft_flags: List[SoftFlag] = field(default_factory=list)

    # Auxiliary portability flags (all soft)
    auxiliary_flags: List[SoftFlag] = field(default_factory=list)

    # Always the final LDFLAGS token
    math_library: str = "-lm"

    @classmethod
    def default(cls) -> "Profile":
        """gcc / clang / icc on Linux and macOS."""
        return cls(
            profile_id="c99-gcc-clang-icc",
            base_cflags=[
                "-O3",
                "-fno-math-errno",
                "-funroll-loops",
                "-fomit-frame-pointer",
                "-Wall",
            ],
            standard_cflags=["-std=c99", "-I."],
            debug_cflags=["-g"],
            release_cflags=["-DNDEBUG"],
            sse_enabled_cflags=["-DUSE_SSE=1", "-msse"],
            sse_soft_flags=[
                # ICC: silence the later -msse semantics warning
                SoftFlag("-wd10121"),
                # GCC on x86_32 needs it explicitly; others imply it
                SoftFlag("-mfpmath=sse", prerequisite=("-msse",)),
            ],
            sse_disabled_cflags=["-DUSE_SSE=0"],
            openmp_dynamic_flags=["-fopenmp"],
            openmp_static_flags=[
                "-static-libgcc",
                "-Bstatic",
                "-fopenmp",
                "-Bdynamic",
            ],
            no_openmp_cflags=["-Wno-unknown-pragmas"],
            no_openmp_soft_flags=[SoftFlag("-wd3180")],  # ICC
            auxiliary_flags=[
                # 387 math is much slower in C99 mode without it (GCC >= 4.5)
                SoftFlag("-fexcess-precision=fast"),
                # ICC equivalent of -march=native
                SoftFlag("-xHOST"),
                # ICC: keep the fp precision written in the source
                SoftFlag("-fp-model source"),
                # gold linker string misalignment warning
                SoftFlag("-falign-stack=maintain-16-byte"),
            ],
            math_library="-lm",
        )
