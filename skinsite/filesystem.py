"""Filesystem primitives used to copy static resources into the output."""

from __future__ import annotations

import shutil
import typing as typ

from .errors import ResourceCopyError

if typ.TYPE_CHECKING:
    from pathlib import Path


class FileSystem(typ.Protocol):
    """Copy primitive used by the build pipeline."""

    def copy_directory(
        self, source: Path, destination: Path, recursive: bool = True
    ) -> None:
        """Copy the contents of ``source`` into ``destination``."""
        ...


class LocalFileSystem:
    """Copy directories on the local disk with :mod:`shutil`."""

    def copy_directory(
        self, source: Path, destination: Path, recursive: bool = True
    ) -> None:
        """Merge the contents of ``source`` into ``destination``.

        Parameters
        ----------
        source : Path
            Directory whose contents are copied. The directory itself is not
            recreated under ``destination``.
        destination : Path
            Target directory; created when missing. Existing files are
            overwritten.
        recursive : bool, optional
            Copy nested directories too. When ``False`` only the top-level
            files of ``source`` are copied.

        Raises
        ------
        ResourceCopyError
            If ``source`` is not a directory or any copy operation fails.
        """
        if not source.is_dir():
            msg = "Resource directory not found"
            raise ResourceCopyError(msg, path=source)
        try:
            if recursive:
                shutil.copytree(source, destination, dirs_exist_ok=True)
                return
            destination.mkdir(parents=True, exist_ok=True)
            for entry in sorted(source.iterdir()):
                if entry.is_file():
                    shutil.copy2(entry, destination / entry.name)
        except OSError as exc:
            msg = f"Failed to copy resources into '{destination}': {exc}"
            raise ResourceCopyError(msg, path=source) from exc


__all__ = ["FileSystem", "LocalFileSystem"]
