"""Filesystem helpers."""

import shutil
from pathlib import Path


def copy_path(source_path, destination_path):
    """Copy a file or tree as ``cp -a`` does; return the path written."""
    if not source_path:
        raise ValueError("source path must not be empty")
    if not destination_path:
        raise ValueError("destination path must not be empty")

    source, destination = Path(source_path), Path(destination_path)
    if destination.is_dir() and not destination.is_symlink():
        destination = destination / source.name
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    else:
        if source.is_symlink() and destination.is_symlink():
            destination.unlink()
        shutil.copy2(source, destination, follow_symlinks=False)
    return str(destination)