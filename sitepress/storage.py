"""Filesystem helpers that report failures as ``FileIOError``.

Every project has three well-known folders under its root: ``Output`` for the
generated site, ``.publish`` for internal state and ``.publish/Caches`` for
per-step cache blobs. :class:`FolderGroup` bundles them; the functions below
wrap :mod:`pathlib` and :mod:`shutil` so that any ``OSError`` becomes a
:class:`~sitepress.errors.FileIOError` naming the offending path.
"""

from __future__ import annotations

import dataclasses as dc
import shutil
from pathlib import Path

from ._constants import CACHES_FOLDER, INTERNAL_FOLDER, OUTPUT_FOLDER
from .errors import FileIOError, FileIOErrorReason


@dc.dataclass(frozen=True, slots=True)
class FolderGroup:
    """The folders a publishing run reads from and writes to."""

    root: Path
    output: Path
    internal: Path
    caches: Path

    @classmethod
    def for_root(cls, root: Path) -> FolderGroup:
        internal = root / INTERNAL_FOLDER
        return cls(
            root=root,
            output=root / OUTPUT_FOLDER,
            internal=internal,
            caches=internal / CACHES_FOLDER,
        )

    def create(self) -> None:
        """Create the output, internal and cache folders if missing."""
        for folder in (self.output, self.internal, self.caches):
            folder.mkdir(parents=True, exist_ok=True)


def existing_folder(base: Path, path: str) -> Path:
    folder = base / path if path else base
    if not folder.is_dir():
        raise FileIOError(path, FileIOErrorReason.FOLDER_NOT_FOUND)
    return folder


def existing_file(base: Path, path: str) -> Path:
    file = base / path
    if not file.is_file():
        raise FileIOError(path, FileIOErrorReason.FILE_NOT_FOUND)
    return file


def create_folder(base: Path, path: str) -> Path:
    folder = base / path if path else base
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileIOError(
            path, FileIOErrorReason.FOLDER_CREATION_FAILED, underlying_error=exc
        ) from exc
    return folder


def create_file(base: Path, path: str) -> Path:
    file = base / path
    try:
        file.parent.mkdir(parents=True, exist_ok=True)
        file.touch(exist_ok=True)
    except OSError as exc:
        raise FileIOError(
            path, FileIOErrorReason.FILE_CREATION_FAILED, underlying_error=exc
        ) from exc
    return file


def write_text(base: Path, path: str, text: str) -> Path:
    """Write ``text`` to ``base / path``, creating parent folders."""
    file = base / path
    try:
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileIOError(
            path, FileIOErrorReason.FILE_CREATION_FAILED, underlying_error=exc
        ) from exc
    return file


def read_text(file: Path, path: str | None = None) -> str:
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileIOError(
            path or str(file),
            FileIOErrorReason.FILE_COULD_NOT_BE_READ,
            underlying_error=exc,
        ) from exc


def copy_into(source: Path, target_folder: Path, path: str) -> Path:
    """Copy a file or folder into ``target_folder``, replacing what is there."""
    destination = target_folder / source.name
    try:
        target_folder.mkdir(parents=True, exist_ok=True)
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            shutil.copy2(source, destination)
    except OSError as exc:
        reason = (
            FileIOErrorReason.FOLDER_COPYING_FAILED
            if source.is_dir()
            else FileIOErrorReason.FILE_COPYING_FAILED
        )
        raise FileIOError(path, reason, underlying_error=exc) from exc
    return destination


def copy_contents(source: Path, target_folder: Path, path: str) -> None:
    """Copy everything inside ``source`` into ``target_folder``."""
    try:
        shutil.copytree(source, target_folder, dirs_exist_ok=True)
    except OSError as exc:
        raise FileIOError(
            path, FileIOErrorReason.FOLDER_COPYING_FAILED, underlying_error=exc
        ) from exc


def empty_folder(folder: Path, *, include_hidden: bool = True) -> None:
    """Delete every entry in ``folder``, hidden ones included by default."""
    if not folder.exists():
        return
    for entry in folder.iterdir():
        if not include_hidden and entry.name.startswith("."):
            continue
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


__all__ = [
    "FolderGroup",
    "copy_contents",
    "copy_into",
    "create_file",
    "create_folder",
    "empty_folder",
    "existing_file",
    "existing_folder",
    "read_text",
    "write_text",
]
