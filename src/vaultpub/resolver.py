"""Attachment lookup for image references."""

from __future__ import annotations

from pathlib import PurePosixPath

from vaultpub.errors import VaultpubAssetNotFoundError
from vaultpub.models import ImageReference, ResolvedReference
from vaultpub.observability import get_logger
from vaultpub.utils.paths import join_path, normalize_path
from vaultpub.vault.base import DocumentStore

log = get_logger("vaultpub.resolver")


class AssetResolver:
    """Locate the attachment file behind an :class:`ImageReference`.

    The store decides which directory an attachment with the candidate's
    name lives in; the resolved file is the candidate's file name inside
    that directory.

    Parameters
    ----------
    store:
        The vault to search.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def resolve(self, reference: ImageReference) -> ResolvedReference:
        """Return the resolved form of *reference*.

        Raises
        ------
        VaultpubAssetNotFoundError
            If no file exists at the resolved location, or the store
            rejects the candidate path (for example one outside the vault).
        """
        candidate = normalize_path(reference.candidate_path)
        try:
            placement = await self._store.resolve_attachment_path(candidate)
            directory = str(PurePosixPath(normalize_path(placement)).parent)
            resolved_path = join_path(directory, PurePosixPath(candidate).name)
            found = await self._store.exists(resolved_path)
        except ValueError as exc:
            # The store rejects paths it cannot hold, e.g. outside the vault.
            log.warning(
                "attachment path rejected",
                extra={"extra_fields": {
                    "op": "resolve",
                    "name": reference.display_name,
                    "candidate_path": candidate,
                    "error": str(exc),
                }},
            )
            raise VaultpubAssetNotFoundError(
                message=(
                    f"Cannot locate {reference.display_name} with {candidate}: {exc}"
                ),
                context={
                    "name": reference.display_name,
                    "candidate_path": candidate,
                    "resolved_path": None,
                },
                cause=exc,
            ) from exc

        if not found:
            log.warning(
                "attachment not found",
                extra={"extra_fields": {
                    "op": "resolve",
                    "name": reference.display_name,
                    "candidate_path": candidate,
                    "resolved_path": resolved_path,
                }},
            )
            raise VaultpubAssetNotFoundError(
                message=(
                    f"Cannot locate {reference.display_name} with {resolved_path}, "
                    "please check the image path or the attachment location setting"
                ),
                context={
                    "name": reference.display_name,
                    "candidate_path": candidate,
                    "resolved_path": resolved_path,
                },
            )

        return ResolvedReference(
            reference=reference,
            resolved_path=resolved_path,
            full_path=self._store.full_path(resolved_path),
        )
