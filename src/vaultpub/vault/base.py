"""Host collaborator protocols.

The pipeline never touches the filesystem, the editor or the user
interface directly.  It talks to objects satisfying these protocols,
injected into :class:`~vaultpub.publisher.ImagePublisher`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Access to the vault holding the active note and its attachments.

    All paths are vault-relative unless stated otherwise.
    """

    async def resolve_attachment_path(self, candidate_path: str) -> str:
        """Return where an attachment named like *candidate_path* would be
        placed.  Best-effort; the file need not exist."""
        ...

    async def exists(self, path: str) -> bool:
        """Return ``True`` if *path* names an existing file."""
        ...

    async def read_binary(self, path: str) -> bytes:
        """Return the contents of *path*."""
        ...

    async def delete(self, path: str) -> bool:
        """Delete *path*.  Returns ``False`` if nothing was deleted."""
        ...

    def full_path(self, path: str) -> str:
        """Return the fully qualified location of *path*."""
        ...

    async def get_active_document_text(self) -> str:
        """Return the text of the active note (``""`` if there is none)."""
        ...

    async def set_active_document_text(self, text: str) -> None:
        """Replace the text of the active note."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Shows short-lived messages to the user."""

    def notify(self, message: str, timeout_ms: int | None = None) -> None:
        ...


@runtime_checkable
class Clipboard(Protocol):
    """Receives the published text."""

    def write_text(self, text: str) -> None:
        ...
