"""
Shared pytest fixtures for toolchain_probe tests.

Most tests run against small fake compilers: /bin/sh scripts that log
their argv, swallow stdin, and behave like a compiler in the ways the
probe cares about (baseline failure, warnings on unknown flags, OpenMP
header expansion).  Those are skipped on Windows.

``gcc_ok`` gates the few tests that drive a real gcc.
"""
import os
import platform
import shutil
import stat
import textwrap
from pathlib import Path
from typing import Sequence

import pytest

from toolchain_probe.config import ProbeSettings
from toolchain_probe.core.host import HostInfo

# ICC-only spellings; a gcc-like compiler warns about them.
ICC_FLAG_PATTERNS = ("-wd*", "-xHOST", "-fp-model", "-falign-stack=*")

ENGLISH_WARNING = "warning: unrecognized command-line option '%s'\\n"
# "\xab%s\xbb" in ISO-8859-1, as a non-UTF-8 locale prints it
LATIN1_WARNING = "Warnung: unbekannte Option \\253%s\\273\\n"

VERSION_HEADER = textwrap.dedent("""\
    #ifndef LIBIMAGEQUANT_H
    #define LIBIMAGEQUANT_H
    #define LIQ_VERSION 21700
    #define LIQ_VERSION_STRING "2.17.0"
    #endif
""")


def make_fake_cc(
    directory: Path,
    name: str = "fake-cc",
    broken: bool = False,
    openmp: bool = True,
    warn_on: Sequence[str] = ICC_FLAG_PATTERNS,
    warning: str = ENGLISH_WARNING,
) -> Path:
    """
    Write an executable fake compiler into *directory*.

    Every invocation appends its argv to ``<name>.log`` next to the script.
    *warning* is a printf format for the diagnostic printed on the
    *warn_on* flags; ``%s`` is the offending flag.
    """
    log_path = directory / f"{name}.log"
    warn_case = ""
    if warn_on:
        warn_case = (
            f"    {'|'.join(warn_on)}) "
            f"printf \"{warning}\" \"$arg\" >&2 ;;\n"
        )
    broken_block = ""
    if broken:
        broken_block = 'echo "error: no usable C backend" >&2\nexit 1\n'

    script = (
        "#!/bin/sh\n"
        f'echo "$*" >> "{log_path}"\n'
        "preprocess=0\n"
        "openmp=0\n"
        'for arg in "$@"; do\n'
        '  case "$arg" in\n'
        "    -E) preprocess=1 ;;\n"
        "    -fopenmp) openmp=1 ;;\n"
        "  esac\n"
        '  case "$arg" in\n'
        f"{warn_case}"
        "    *) ;;\n"
        "  esac\n"
        "done\n"
        "cat > /dev/null\n"
        f"{broken_block}"
        f'if [ "$preprocess" = 1 ] && [ "$openmp" = 1 ] && [ {int(openmp)} = 1 ]; then\n'
        '  echo "extern int omp_get_thread_num (void);"\n'
        "fi\n"
        "exit 0\n"
    )
    path = directory / name
    path.write_text(script)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def invocations(fake_cc: Path) -> list:
    """argv lines the fake compiler has logged so far."""
    log_path = fake_cc.with_name(f"{fake_cc.name}.log")
    if not log_path.exists():
        return []
    return log_path.read_text().splitlines()


@pytest.fixture(scope="session")
def posix_shell():
    if platform.system() == "Windows" or not Path("/bin/sh").exists():
        pytest.skip("fake compilers are /bin/sh scripts")


@pytest.fixture
def fake_cc(tmp_path, posix_shell) -> Path:
    """gcc-like: builds C99, supports OpenMP, warns on ICC flags."""
    return make_fake_cc(tmp_path, "gcc-like")


@pytest.fixture
def broken_cc(tmp_path, posix_shell) -> Path:
    """Fails every compilation."""
    return make_fake_cc(tmp_path, "broken-cc", broken=True)


@pytest.fixture
def no_openmp_cc(tmp_path, posix_shell) -> Path:
    """Accepts -fopenmp but omp.h never expands to the runtime API."""
    return make_fake_cc(tmp_path, "no-omp-cc", openmp=False)


@pytest.fixture
def quiet_cc(tmp_path, posix_shell) -> Path:
    """Accepts every flag silently."""
    return make_fake_cc(tmp_path, "quiet-cc", warn_on=())


@pytest.fixture
def latin1_cc(tmp_path, posix_shell) -> Path:
    """gcc-like, but its diagnostics are ISO-8859-1 bytes, not UTF-8."""
    return make_fake_cc(tmp_path, "latin1-cc", warning=LATIN1_WARNING)


@pytest.fixture
def version_header(tmp_path) -> Path:
    p = tmp_path / "libimagequant.h"
    p.write_text(VERSION_HEADER)
    return p


@pytest.fixture
def settings(tmp_path, version_header, clean_env) -> ProbeSettings:
    return ProbeSettings(
        _env_file=None,
        CONFIG_FILE=str(tmp_path / "config.mk"),
        VERSION_HEADER=str(version_header),
        PROBE_TIMEOUT=10,
    )


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "config.mk"


@pytest.fixture
def x86_64_host(tmp_path) -> HostInfo:
    return HostInfo(arch="x86_64", cpuinfo_path=tmp_path / "no-cpuinfo")


@pytest.fixture
def arm_host(tmp_path) -> HostInfo:
    """aarch64 with an ARM-style descriptor (no ``flags`` line)."""
    cpuinfo = tmp_path / "cpuinfo-arm"
    cpuinfo.write_text("processor\t: 0\nFeatures\t: fp asimd evtstrm aes\n")
    return HostInfo(arch="aarch64", cpuinfo_path=cpuinfo)


@pytest.fixture
def i686_sse_host(tmp_path) -> HostInfo:
    """32-bit x86 whose descriptor lists SSE."""
    cpuinfo = tmp_path / "cpuinfo-i686"
    cpuinfo.write_text(
        "processor\t: 0\n"
        "flags\t\t: fpu vme de pse tsc msr pae mce cx8 sse sse2\n"
        "processor\t: 1\n"
        "flags\t\t: fpu\n"
    )
    return HostInfo(arch="i686", cpuinfo_path=cpuinfo)


@pytest.fixture(scope="session")
def gcc_ok():
    """Skip tests if gcc is not available."""
    if shutil.which("gcc") is None:
        pytest.skip("gcc not available - install gcc to run these tests")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove toolchain variables the developer's shell may have set."""
    for name in ("CC", "CFLAGS", "LDFLAGS", "PROBE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return os.environ
