"""
toolchain_probe — pre-build C toolchain capability probe.

Inspects the configured C compiler (C99 baseline, SSE, OpenMP, optional
tuning flags) and writes a flat key/value config.mk for the Makefile.
"""

__version__ = "0.1.0"
DEFAULT_COMPILER = "gcc"
DEFAULT_PREFIX = "/usr/local"
