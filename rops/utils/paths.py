import shutil
from pathlib import Path

from rops.errors import FilesystemError


def rimraf(path: str | Path) -> bool:
    """Remove a directory tree if it exists.

    Returns:
        True if something was removed, False if the path did not exist

    Raises:
        FilesystemError: If the directory exists but cannot be removed
    """
    target = Path(path)
    if not target.exists():
        return False
    try:
        shutil.rmtree(target)
    except OSError as exc:
        raise FilesystemError(
            f"Failed to remove directory '{target}': {exc}"
        ) from exc
    return True


def canonical(path: str | Path) -> Path:
    """Resolve a path to its canonical form, keeping it as-is if missing."""
    try:
        return Path(path).resolve(strict=True)
    except OSError:
        return Path(path)
