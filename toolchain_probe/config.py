"""
Probe settings — the environment layer below the command line.
"""
from pydantic_settings import BaseSettings


class ProbeSettings(BaseSettings):
    """Environment-provided defaults; CLI ``KEY=value`` tokens override them."""

    # Toolchain (same names make/autoconf use)
    CC: str | None = None
    CFLAGS: str | None = None
    LDFLAGS: str | None = None

    # Probing
    PROBE_TIMEOUT: float = 60.0  # seconds, per compiler invocation

    # Inputs / outputs
    CONFIG_FILE: str = "config.mk"
    VERSION_HEADER: str = "libimagequant.h"
    VERSION_MACRO: str = "LIQ_VERSION_STRING"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"
