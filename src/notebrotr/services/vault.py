"""
Document storage.

Handlers depend only on the [Vault][notebrotr.services.vault.Vault]
protocol. [DirectoryVault][notebrotr.services.vault.DirectoryVault] stores
documents as UTF-8 files under a base directory; blocking filesystem calls
are offloaded with ``asyncio.to_thread()``.

Paths are vault-relative and use ``/`` separators.
"""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath
from typing import Protocol

from notebrotr.core.exceptions import StorageError
from notebrotr.core.logger import Logger


class Vault(Protocol):
    """Minimal async document store."""

    async def read(self, path: str) -> str: ...

    async def write(self, path: str, content: str) -> None: ...

    async def exists(self, path: str) -> bool: ...

    async def list(self, directory: str) -> list[str]: ...


class DirectoryVault:
    """[Vault][notebrotr.services.vault.Vault] backed by a local directory.

    Args:
        root: Base directory. Created on first write if missing.

    Raises:
        StorageError: From any operation, when a path escapes *root* or the
            filesystem call fails.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        self._logger = Logger("vault")

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a vault-relative path to an absolute one inside the root."""
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"path escapes the vault: {path}")
        return self._root.joinpath(*relative.parts)

    async def read(self, path: str) -> str:
        target = self.resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"failed to read {path}: {e}") from e

    async def write(self, path: str, content: str) -> None:
        target = self.resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"failed to write {path}: {e}") from e
        self._logger.debug("document_written", path=path, size=len(content))

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self.resolve(path).is_file)

    async def list(self, directory: str) -> list[str]:
        """Vault-relative paths of the ``.md`` files directly inside *directory*.

        A missing directory yields an empty list. Results are sorted.
        """
        base = self.resolve(directory)

        def _scan() -> list[str]:
            if not base.is_dir():
                return []
            return sorted(
                p.relative_to(self._root).as_posix()
                for p in base.iterdir()
                if p.is_file() and p.suffix == ".md"
            )

        try:
            return await asyncio.to_thread(_scan)
        except OSError as e:
            raise StorageError(f"failed to list {directory}: {e}") from e
