import os
import stat
from pathlib import Path

from .errors import TargetDirectoryError
from .log import get_logger
from .objects import Blob

logger = get_logger("materializer")

EXECUTABLE_MODE = "100755"


def safe_target(root: Path, relative_path: str) -> Path | None:
    """Return ``root / relative_path`` or None if it would land outside ``root``."""
    if "\\" in relative_path or relative_path.startswith("/"):
        return None
    segments = relative_path.split("/")
    if any(s in ("", ".", "..") for s in segments):
        return None

    target = (root / Path(*segments)).resolve()
    if os.path.commonpath([str(root), str(target)]) != str(root):
        return None
    return target


def materialize(entries, target_root, loader, apply_modes: bool = False) -> list[Path]:
    root = Path(target_root)
    if not root.exists() or not root.is_dir():
        raise TargetDirectoryError(f"Target directory does not exist: {target_root}")
    root = root.resolve()

    written = []
    for entry in entries:
        target = safe_target(root, entry.path)
        if target is None:
            logger.warning(f"Refusing to write {entry.path!r} outside {root}")
            continue

        # blob bytes were not kept from the walk, fetch them again
        obj = loader.load(entry.hash)
        if not isinstance(obj, Blob):
            logger.warning(f"Skipping {entry.path}: blob {entry.hash} not available")
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as file:
            file.write(obj.content)

        if apply_modes and entry.mode == EXECUTABLE_MODE:
            current = target.stat().st_mode
            target.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        logger.debug(f"Wrote {entry.path}")
        written.append(target)

    logger.info(f"Wrote {len(written)} of {len(entries)} files to {root}")
    return written
