"""Note rewriting: swap local image embeds for their remote URLs."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import PurePosixPath

from vaultpub.config import PublishConfig
from vaultpub.models import RewriteResult, UploadOutcome
from vaultpub.observability import MetricsHook, NoopMetricsHook, get_logger
from vaultpub.vault.base import DocumentStore

log = get_logger("vaultpub.rewriter")

# Leading properties (front matter) block; must start at offset zero.
_PROPERTIES_RE = re.compile(r"\A---[\s\S]+?---\n")


def alt_text_for(name: str) -> str:
    """Derive alt text from an image file name.

    >>> alt_text_for("assets/my-cat_photo.png")
    'my cat photo'
    """
    return PurePosixPath(name).stem.replace("-", " ").replace("_", " ")


def canonical_markup(alt_text: str, url: str) -> str:
    """Return the Markdown image form ``![alt](url)``."""
    return f"![{alt_text}]({url})"


def substitute(
    text: str,
    outcomes: Sequence[UploadOutcome],
    *,
    alt_text: bool = True,
) -> str:
    """Replace the raw span of every successful outcome with its remote form.

    Outcomes are applied in the given order and each replacement sees the
    text produced by the previous ones.  Every occurrence of a raw span
    is replaced; identical spans always point at the same attachment.
    Failed outcomes leave the text untouched.
    """
    for outcome in outcomes:
        if not outcome.ok:
            continue
        reference = outcome.reference.reference
        alt = alt_text_for(reference.display_name) if alt_text else ""
        text = text.replace(reference.raw_span, canonical_markup(alt, outcome.url))
    return text


def strip_properties(text: str) -> str:
    """Remove a leading ``---``-delimited properties block, once."""
    return _PROPERTIES_RE.sub("", text, count=1)


class DocumentRewriter:
    """Apply upload outcomes to the note text.

    Parameters
    ----------
    store:
        Used to delete attachments when ``config.delete_attachments``.
    config:
        Supplies ``image_alt_text``, ``delete_attachments`` and
        ``ignore_properties``.
    """

    def __init__(self, store: DocumentStore, config: PublishConfig) -> None:
        self._store = store
        self._config = config
        self._metrics: MetricsHook = (
            config.metrics if config.metrics is not None else NoopMetricsHook()
        )

    async def rewrite(
        self, text: str, outcomes: Sequence[UploadOutcome]
    ) -> RewriteResult:
        """Substitute, delete attachments, and derive the output text.

        ``document_text`` keeps the properties block; only ``output_text``
        is stripped when ``ignore_properties`` is on.
        """
        successes = [o for o in outcomes if o.ok]
        document_text = substitute(text, successes, alt_text=self._config.image_alt_text)

        deleted: list[str] = []
        if self._config.delete_attachments:
            for path in dict.fromkeys(o.reference.resolved_path for o in successes):
                if await self._delete(path):
                    deleted.append(path)

        output_text = document_text
        if self._config.ignore_properties:
            output_text = strip_properties(output_text)

        log.info(
            "note rewritten",
            extra={"extra_fields": {
                "op": "rewrite",
                "substituted": len(successes),
                "deleted": len(deleted),
            }},
        )
        return RewriteResult(
            document_text=document_text,
            output_text=output_text,
            substituted=len(successes),
            deleted=deleted,
        )

    async def _delete(self, path: str) -> bool:
        try:
            removed = await self._store.delete(path)
        except OSError as exc:
            log.warning(
                "attachment delete failed",
                extra={"extra_fields": {"op": "delete", "path": path, "error": str(exc)}},
            )
            return False
        if removed:
            self._metrics.increment("vaultpub.attachments_deleted_total")
        return removed
