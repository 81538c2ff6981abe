"""
Version lookup in the library's public header (read only).
"""
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"\d+\.[0-9.]+")


def read_version(header_path: Path, macro: str) -> str:
    """
    Return the version number on the first line mentioning *macro*.

    ``#define LIQ_VERSION_STRING "2.17.0"`` → ``"2.17.0"``.  A missing
    header or an unmatched line gives "" (logged, not fatal).
    """
    try:
        text = header_path.read_text(errors="replace")
    except OSError as e:
        logger.warning("cannot read version header %s: %s", header_path, e)
        return ""

    for line in text.splitlines():
        if macro in line:
            m = _VERSION_RE.search(line)
            if m:
                return m.group(0)
    logger.warning("no %s version found in %s", macro, header_path)
    return ""
