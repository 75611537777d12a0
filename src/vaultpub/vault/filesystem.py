"""A :class:`DocumentStore` backed by a directory on disk.

The vault is a directory tree; the active note is one Markdown file in
it.  Blocking filesystem calls run in the event loop's default executor
so concurrent uploads are not stalled by disk I/O.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import TypeVar

from vaultpub.observability import get_logger
from vaultpub.utils.paths import normalize_path

log = get_logger("vaultpub.vault")

_T = TypeVar("_T")


class FileSystemVault:
    """Vault rooted at *root* whose active note is *document*.

    Parameters
    ----------
    root:
        Vault root directory.
    document:
        Path of the active note, absolute or relative to *root*.  ``None``
        means no note is open: the active text is ``""`` and writes are
        rejected.
    encoding:
        Text encoding of the note.
    """

    def __init__(
        self,
        root: str | Path,
        document: str | Path | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._root = Path(root).expanduser().resolve()
        self._encoding = encoding
        self._document: Path | None = None
        if document is not None:
            doc = Path(document).expanduser()
            if not doc.is_absolute():
                doc = self._root / doc
            self._document = doc.resolve()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def document(self) -> Path | None:
        return self._document

    # -- path helpers ------------------------------------------------------

    def _absolute(self, path: str) -> Path:
        """Map a vault path to a filesystem path inside the vault root.

        Raises
        ------
        ValueError
            If *path* escapes the vault root.
        """
        normalized = normalize_path(path)
        if normalized == "/":
            return self._root
        target = (self._root / normalized).resolve()
        if not target.is_relative_to(self._root):
            raise ValueError(f"Path escapes vault root: {path}")
        return target

    def full_path(self, path: str) -> str:
        return str(self._absolute(path))

    async def _run(self, func: Callable[..., _T], *args: object) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    # -- DocumentStore -----------------------------------------------------

    async def resolve_attachment_path(self, candidate_path: str) -> str:
        """Return *candidate_path*, or the first free ``"<stem> <n><ext>"``
        sibling if a file already occupies it."""
        return await self._run(self._available_path, normalize_path(candidate_path))

    def _available_path(self, candidate: str) -> str:
        if not self._absolute(candidate).exists():
            return candidate
        pure = PurePosixPath(candidate)
        parent = "" if str(pure.parent) == "." else f"{pure.parent}/"
        n = 1
        while True:
            sibling = f"{parent}{pure.stem} {n}{pure.suffix}"
            if not self._absolute(sibling).exists():
                return sibling
            n += 1

    async def exists(self, path: str) -> bool:
        try:
            target = self._absolute(path)
        except ValueError:
            log.warning(
                "path outside vault",
                extra={"extra_fields": {"op": "exists", "path": path}},
            )
            return False
        return await self._run(target.is_file)

    async def read_binary(self, path: str) -> bytes:
        return await self._run(self._absolute(path).read_bytes)

    async def delete(self, path: str) -> bool:
        target = self._absolute(path)
        try:
            await self._run(target.unlink)
        except FileNotFoundError:
            return False
        log.info(
            "attachment deleted",
            extra={"extra_fields": {"op": "delete", "path": normalize_path(path)}},
        )
        return True

    async def get_active_document_text(self) -> str:
        if self._document is None:
            return ""
        return await self._run(self._document.read_text, self._encoding)

    async def set_active_document_text(self, text: str) -> None:
        if self._document is None:
            raise RuntimeError("No active document to write to")
        await self._run(self._write_document, text)

    def _write_document(self, text: str) -> None:
        assert self._document is not None
        self._document.write_text(text, encoding=self._encoding)
