"""
Writer — guard and persist config.mk.

The file is written next to its destination and renamed into place, so a
failed write never leaves a truncated config.mk behind.
"""
import logging
import os
import tempfile
from pathlib import Path

from toolchain_probe.errors import WriteGuardError
from toolchain_probe.io.schema import ResolvedConfig

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o644


def ensure_writable(config_path: Path) -> None:
    """
    Refuse to continue if an existing config file cannot be overwritten.

    Happens when ``sudo make install`` ran before the first configure and
    left a root-owned config.mk behind.
    """
    if config_path.is_file() and not os.access(config_path, os.W_OK):
        raise WriteGuardError(f"Cannot overwrite file {config_path}! Please delete it.")


def write_config(config: ResolvedConfig, config_path: Path) -> Path:
    """
    Write *config* to *config_path*, replacing a previous writable file.

    An existing file keeps its permission bits.  Any OS-level failure
    (missing directory, destination is a directory, disk full) is raised
    as WriteGuardError and the previous file, if any, stays as it was.

    Returns the path written.
    """
    ensure_writable(config_path)
    mode = config_path.stat().st_mode & 0o777 if config_path.is_file() else DEFAULT_MODE

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=config_path.parent,
            prefix=f".{config_path.name}.",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(config.render())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, config_path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteGuardError(f"Cannot write {config_path}: {e}") from e

    logger.debug("wrote %s", config_path)
    return config_path
