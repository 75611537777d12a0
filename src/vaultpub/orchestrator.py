"""Concurrent upload orchestration.

Every submitted reference starts uploading right away as an ``asyncio``
task; :meth:`UploadOrchestrator.settle` waits for all of them and turns
each into an :class:`~vaultpub.models.UploadOutcome`.  A failing upload
never cancels its siblings, and nothing is retried.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

from vaultpub.config import DEFAULT_NOTICE_TIMEOUT_MS
from vaultpub.errors import VaultpubError, VaultpubUploadError
from vaultpub.models import ResolvedReference, UploadOutcome
from vaultpub.observability import MetricsHook, NoopMetricsHook, get_logger
from vaultpub.uploader.base import ImageUploader
from vaultpub.vault.base import DocumentStore, Notifier

log = get_logger("vaultpub.orchestrator")


class UploadOrchestrator:
    """Fan out uploads, fan in outcomes.

    Submitting the same attachment twice within one batch reuses the
    first upload, so each distinct file is uploaded at most once; every
    submission still gets its own outcome.

    Parameters
    ----------
    store:
        Source of the image bytes.
    uploader:
        The upload service.
    notifier:
        Receives one notice per failed upload.
    notice_timeout_ms:
        Display time of failure notices.
    metrics:
        Optional metrics backend.
    """

    def __init__(
        self,
        store: DocumentStore,
        uploader: ImageUploader,
        notifier: Notifier,
        *,
        notice_timeout_ms: int = DEFAULT_NOTICE_TIMEOUT_MS,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._store = store
        self._uploader = uploader
        self._notifier = notifier
        self._notice_timeout_ms = notice_timeout_ms
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._tasks: dict[str, asyncio.Task[str]] = {}
        self._submissions: list[tuple[ResolvedReference, asyncio.Task[str]]] = []

    @property
    def pending(self) -> int:
        """Number of submissions not yet settled."""
        return len(self._submissions)

    def submit(self, resolved: ResolvedReference) -> None:
        """Start uploading *resolved*.  Must be called from a running loop."""
        task = self._tasks.get(resolved.resolved_path)
        if task is None:
            task = asyncio.create_task(
                self._upload(resolved),
                name=f"upload:{resolved.resolved_path}",
            )
            self._tasks[resolved.resolved_path] = task
        self._submissions.append((resolved, task))

    async def settle(self) -> list[UploadOutcome]:
        """Wait for every submitted upload and return their outcomes.

        Outcomes are in submission order, regardless of the order the
        uploads finished in.  The orchestrator is empty afterwards and
        can take a new batch.
        """
        submissions, self._submissions = self._submissions, []
        self._tasks = {}
        if not submissions:
            return []

        # All-settled join: exceptions stay on their tasks.
        await asyncio.gather(
            *dict.fromkeys(task for _, task in submissions),
            return_exceptions=True,
        )

        outcomes: list[UploadOutcome] = []
        reported: set[int] = set()
        for resolved, task in submissions:
            error = self._task_error(resolved, task)
            if error is None:
                outcomes.append(UploadOutcome(reference=resolved, url=task.result()))
                continue
            outcomes.append(UploadOutcome(reference=resolved, error=error))
            if id(task) not in reported:
                reported.add(id(task))
                self._report_failure(resolved, error)
        return outcomes

    async def upload_all(
        self, references: Iterable[ResolvedReference]
    ) -> list[UploadOutcome]:
        """Submit every reference, then settle."""
        for resolved in references:
            self.submit(resolved)
        return await self.settle()

    # -- internals ---------------------------------------------------------

    async def _upload(self, resolved: ResolvedReference) -> str:
        name = resolved.reference.display_name
        data = await self._store.read_binary(resolved.resolved_path)
        t0 = time.monotonic()
        url = await self._uploader.upload(data, name, resolved.full_path)
        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing("vaultpub.upload_duration_ms", elapsed_ms)
        if not url:
            raise VaultpubUploadError(
                message="upload service returned an empty URL",
                context={"name": name, "path": resolved.resolved_path},
            )
        self._metrics.increment("vaultpub.upload_success_total")
        log.info(
            "image uploaded",
            extra={"extra_fields": {
                "op": "upload",
                "name": name,
                "path": resolved.resolved_path,
                "url": url,
                "duration_ms": round(elapsed_ms, 2),
            }},
        )
        return url

    @staticmethod
    def _task_error(
        resolved: ResolvedReference, task: asyncio.Task[str]
    ) -> VaultpubError | None:
        context = {
            "name": resolved.reference.display_name,
            "path": resolved.resolved_path,
        }
        if task.cancelled():
            return VaultpubUploadError(message="upload was cancelled", context=context)
        exc = task.exception()
        if exc is None:
            return None
        if isinstance(exc, VaultpubUploadError):
            return exc
        return VaultpubUploadError(
            message=str(exc) or type(exc).__name__,
            context=context,
            cause=exc if isinstance(exc, Exception) else None,
        )

    def _report_failure(self, resolved: ResolvedReference, error: VaultpubError) -> None:
        self._metrics.increment("vaultpub.upload_failure_total")
        log.warning(
            "upload failed",
            extra={"extra_fields": {
                "op": "upload",
                "name": resolved.reference.display_name,
                "path": resolved.resolved_path,
                "code": error.code,
                "error": error.message,
            }},
        )
        self._notifier.notify(
            f"Upload {resolved.reference.candidate_path} failed, "
            f"remote server returned an error: {error.message}",
            self._notice_timeout_ms,
        )
