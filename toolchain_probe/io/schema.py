"""
Schema — the resolved configuration and its config.mk rendering.

config.mk layout (make-style assignments, fixed key order):

    # auto-generated by configure
    PREFIX = ...
    VERSION = ...
    CC = ...
    CFLAGS = ...
    LDFLAGS = ...

Nothing time- or run-dependent is rendered, so identical inputs give
byte-identical files.
"""
from typing import List

from pydantic import BaseModel, Field

from toolchain_probe.core.builder import ConfigBuilder

HEADER_COMMENT = "# auto-generated by configure"


class ResolvedConfig(BaseModel):
    """Everything the downstream Makefile reads from config.mk."""

    prefix: str
    version: str = ""
    compiler: str
    cflags: List[str] = Field(default_factory=list)
    ldflags: List[str] = Field(default_factory=list)

    @classmethod
    def from_builder(cls, builder: ConfigBuilder, prefix: str, version: str) -> "ResolvedConfig":
        return cls(
            prefix=prefix,
            version=version,
            compiler=builder.compiler,
            cflags=builder.cflags(),
            ldflags=builder.ldflags(),
        )

    def as_pairs(self) -> List[tuple]:
        return [
            ("PREFIX", self.prefix),
            ("VERSION", self.version),
            ("CC", self.compiler),
            ("CFLAGS", " ".join(self.cflags)),
            ("LDFLAGS", " ".join(self.ldflags)),
        ]

    def render(self) -> str:
        lines = ["", HEADER_COMMENT]
        lines += [f"{key} = {value}" for key, value in self.as_pairs()]
        return "\n".join(lines) + "\n\n"
