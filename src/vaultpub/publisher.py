"""Publishing pipeline entry point.

:class:`ImagePublisher` wires the stages together::

    note text -> extract_references -> AssetResolver (one by one)
              -> UploadOrchestrator (concurrent) -> DocumentRewriter
              -> dispatch(action)

Usage::

    import asyncio
    from vaultpub import FileSystemVault, HttpImageUploader, ImagePublisher, PublishConfig

    async def main():
        config = PublishConfig(upload_url="https://img.example.com/api/upload")
        vault = FileSystemVault("~/notes", "posts/hello.md")
        async with ImagePublisher(vault, HttpImageUploader(config), config) as publisher:
            result = await publisher.run("PUBLISH")
            print(result.images_uploaded)

    asyncio.run(main())
"""

from __future__ import annotations

from vaultpub.config import PublishConfig
from vaultpub.dispatcher import ACTIONS, dispatch
from vaultpub.errors import ErrorCode, VaultpubAssetNotFoundError, VaultpubInvalidActionError
from vaultpub.matcher import extract_references
from vaultpub.models import ImageReference, PublishResult, PublishWarning
from vaultpub.observability import NoopMetricsHook, get_logger
from vaultpub.orchestrator import UploadOrchestrator
from vaultpub.resolver import AssetResolver
from vaultpub.rewriter import DocumentRewriter
from vaultpub.uploader.base import ImageUploader
from vaultpub.vault.base import Clipboard, DocumentStore, Notifier
from vaultpub.vault.notices import LoggingNotifier, StreamClipboard

log = get_logger("vaultpub.publisher")


class ImagePublisher:
    """Upload the images of the active note and publish the result.

    Parameters
    ----------
    store:
        The vault holding the active note and its attachments.
    uploader:
        The upload service.
    config:
        Pipeline options.  Defaults to ``PublishConfig()``.
    notifier:
        Receives user-visible notices.  Defaults to a
        :class:`LoggingNotifier`.
    clipboard:
        Receives the published text.  Defaults to a
        :class:`StreamClipboard` on stdout.
    """

    def __init__(
        self,
        store: DocumentStore,
        uploader: ImageUploader,
        config: PublishConfig | None = None,
        *,
        notifier: Notifier | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self._store = store
        self._uploader = uploader
        self._config = config or PublishConfig()
        self._notifier = notifier or LoggingNotifier()
        self._clipboard = clipboard or StreamClipboard()
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )
        self._resolver = AssetResolver(store)
        self._rewriter = DocumentRewriter(store, self._config)

    async def run(self, action: str) -> PublishResult:
        """Run the whole pipeline and then *action*.

        Missing attachments and failed uploads are reported to the user
        and recorded in :attr:`PublishResult.warnings`; they do not abort
        the run.  The first missing attachment stops resolution of the
        remaining references, but uploads already started are kept.

        Raises
        ------
        VaultpubInvalidActionError
            If *action* is unknown.  Raised before anything is read or
            uploaded.
        """
        if action not in ACTIONS:
            raise VaultpubInvalidActionError(
                message=f"invalid action: {action!r}",
                context={"action": action, "allowed": sorted(ACTIONS)},
            )

        text = await self._store.get_active_document_text()
        references = extract_references(text, self._config.attachment_location)
        self._metrics.increment("vaultpub.references_total", len(references))
        log.info(
            "references extracted",
            extra={"extra_fields": {"op": "run", "action": action, "count": len(references)}},
        )

        warnings: list[PublishWarning] = []
        orchestrator = UploadOrchestrator(
            self._store,
            self._uploader,
            self._notifier,
            notice_timeout_ms=self._config.notice_timeout_ms,
            metrics=self._metrics,
        )

        try:
            halted_at = await self._resolve_and_submit(references, orchestrator, warnings)
        finally:
            # Uploads already started are collected even if resolution fails.
            outcomes = await orchestrator.settle()

        for outcome in outcomes:
            if outcome.error is not None:
                warnings.append(PublishWarning(
                    code=outcome.error.code,
                    message=outcome.error.message,
                    context={
                        "name": outcome.reference.reference.display_name,
                        "path": outcome.reference.resolved_path,
                    },
                ))

        rewrite = await self._rewriter.rewrite(text, outcomes)

        if self._config.replace_original_doc:
            await self._store.set_active_document_text(rewrite.document_text)
            log.info("note replaced", extra={"extra_fields": {"op": "run"}})

        dispatch(action, rewrite.output_text, self._clipboard, self._notifier)

        uploaded = sum(1 for o in outcomes if o.ok)
        return PublishResult(
            action=action,
            references_found=len(references),
            images_uploaded=uploaded,
            images_failed=len(outcomes) - uploaded,
            halted_at=halted_at,
            document_replaced=self._config.replace_original_doc,
            output_text=rewrite.output_text,
            warnings=warnings,
        )

    async def _resolve_and_submit(
        self,
        references: list[ImageReference],
        orchestrator: UploadOrchestrator,
        warnings: list[PublishWarning],
    ) -> str | None:
        """Resolve *references* in order, submitting each upload right away.

        Returns the candidate path of the first missing attachment, or
        ``None`` when every reference resolved.
        """
        for reference in references:
            try:
                resolved = await self._resolver.resolve(reference)
            except VaultpubAssetNotFoundError as exc:
                self._metrics.increment("vaultpub.asset_not_found_total")
                self._notifier.notify(exc.message, self._config.notice_timeout_ms)
                warnings.append(PublishWarning(
                    code=ErrorCode.ASSET_NOT_FOUND,
                    message=exc.message,
                    context=exc.context,
                ))
                return reference.candidate_path
            orchestrator.submit(resolved)
        return None

    async def close(self) -> None:
        """Close the uploader if it holds resources."""
        close = getattr(self._uploader, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> ImagePublisher:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
