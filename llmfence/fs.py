from __future__ import annotations

import os
import posixpath
import re
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from .formats import DEFAULT_ENCODING

_WINDOWS_ABS_RE = re.compile(r"^[A-Za-z]:[\\/]")


def _is_absolute_like(path: str) -> bool:
    return (
        path.startswith(("/", "\\"))
        or bool(_WINDOWS_ABS_RE.match(path))
        or Path(path).is_absolute()
    )


def normalize_relpath(path: str) -> str:
    """Normalize a project-relative path, refusing anything outside the root."""
    raw = path.strip()
    if not raw:
        raise ValueError("Refusing empty path")
    if _is_absolute_like(raw):
        raise ValueError(f"Refusing absolute path: {raw}")

    normalized = posixpath.normpath(raw.replace("\\", "/"))
    if any(part == ".." for part in PurePosixPath(normalized).parts):
        raise ValueError(f"Refusing path traversal: {raw}")
    return normalized


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


class FileSystem(ABC):
    """Filesystem capability handed to the packer, commands and unpacker.

    All paths are POSIX-style and relative to :attr:`root`.
    """

    root: Path

    @abstractmethod
    def read_bytes(self, rel: str) -> bytes: ...

    @abstractmethod
    def write_text(
        self, rel: str, text: str, encoding: str = DEFAULT_ENCODING
    ) -> int: ...

    @abstractmethod
    def remove(self, rel: str) -> None: ...

    @abstractmethod
    def exists(self, rel: str) -> bool: ...

    @abstractmethod
    def is_file(self, rel: str) -> bool: ...

    @abstractmethod
    def list_dir(self, rel: str = ".") -> list[tuple[str, bool]]:
        """Return ``(name, is_dir)`` pairs for the direct children of ``rel``."""


class LocalFileSystem(FileSystem):
    def __init__(self, root: Path | str | None = None) -> None:
        self.root = Path(root if root is not None else os.getcwd()).resolve()

    def __repr__(self) -> str:
        return f"LocalFileSystem({self.root.as_posix()!r})"

    def resolve(self, rel: str) -> Path:
        normalized = normalize_relpath(rel)
        target = (self.root / normalized).resolve()
        try:
            target.relative_to(self.root)
        except ValueError as e:
            raise ValueError(f"Refusing path outside root: {rel}") from e
        return target

    def read_bytes(self, rel: str) -> bytes:
        return self.resolve(rel).read_bytes()

    def write_text(self, rel: str, text: str, encoding: str = DEFAULT_ENCODING) -> int:
        target = self.resolve(rel)
        data = text.encode(encoding)
        ensure_parent_dir(target)
        target.write_bytes(data)
        return len(data)

    def remove(self, rel: str) -> None:
        target = self.resolve(rel)
        if target.is_dir():
            raise IsADirectoryError(f"Is a directory: {rel}")
        target.unlink()

    def exists(self, rel: str) -> bool:
        try:
            return self.resolve(rel).exists()
        except ValueError:
            return False

    def is_file(self, rel: str) -> bool:
        try:
            return self.resolve(rel).is_file()
        except ValueError:
            return False

    def list_dir(self, rel: str = ".") -> list[tuple[str, bool]]:
        base = self.resolve(rel)
        # Symlinked directories are not followed.
        return [(p.name, p.is_dir() and not p.is_symlink()) for p in base.iterdir()]
