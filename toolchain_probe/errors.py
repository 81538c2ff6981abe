"""
Errors — fatal outcomes of a probe run.

Every fatal condition is a ``ProbeError`` subclass carrying a status
``label`` for the console table.  ``main()`` turns them into exit code 1.
Soft-flag rejections are not errors; see ``policy.verdict.judge_flag``.
"""


class ProbeError(Exception):
    """Base class for fatal probe failures."""

    label = "Configure"

    def __init__(self, message: str, label: str | None = None):
        super().__init__(message)
        if label is not None:
            self.label = label


class UsageError(ProbeError):
    """Malformed or unknown command-line input."""

    label = "Usage"


class ToolchainError(ProbeError):
    """The configured compiler cannot build a trivial C99 program."""

    label = "Compiler"


class FeatureError(ProbeError):
    """An explicitly requested feature is not supported by the toolchain."""


class WriteGuardError(ProbeError):
    """An existing config artifact cannot be overwritten."""

    label = "Config"
