"""Crash-safe loading and committing of document files.

A commit writes the new content to a temporary file beside the target and
renames it over the target, so readers see either the old file or the new
one, never a partial write.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from xml_surgeon.shared.config import PersistenceConfig
from xml_surgeon.shared.logging import get_logger

PathLike = Union[str, Path]


def read_document(path: PathLike, config: Optional[PersistenceConfig] = None) -> str:
    """Read a document file as text.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid in the configured encoding
    """
    config = config or PersistenceConfig()
    # newline="" keeps line endings byte-exact
    with open(path, encoding=config.encoding, newline="") as handle:
        return handle.read()


def atomic_write(
    content: str,
    target_path: PathLike,
    config: Optional[PersistenceConfig] = None,
    correlation_id: Optional[str] = None
) -> Path:
    """Write ``content`` to ``target_path`` through a temporary sibling file.

    The existing target, if any, keeps its permission bits. On any failure the
    temporary file is removed, the target is left untouched and the error is
    re-raised.

    Returns:
        The target path

    Raises:
        OSError: On write, sync or rename failure
    """
    config = config or PersistenceConfig()
    logger = get_logger(__name__, correlation_id, "atomic_commit")
    target = Path(target_path)
    directory = target.parent if str(target.parent) else Path(".")

    fd, temp_name = tempfile.mkstemp(
        dir=directory, prefix=f".{target.name}.", suffix=config.temp_suffix
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=config.encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            if config.fsync:
                os.fsync(handle.fileno())
        if target.exists():
            shutil.copymode(target, temp_path)
        else:
            # mkstemp creates 0600; a new file gets the usual umask-derived mode
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(temp_path, 0o666 & ~umask)
        os.replace(temp_path, target)
    except BaseException:
        logger.warning(
            "Commit failed, target left untouched",
            extra={"target": str(target), "temp_file": str(temp_path)},
            exc_info=True
        )
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        raise

    logger.info(
        "Document committed",
        extra={"target": str(target), "character_count": len(content)}
    )
    return target
