"""Public data models for vaultpub.

Each pipeline stage produces new records instead of mutating the ones it
received: the matcher yields :class:`ImageReference`, the resolver wraps
it in a :class:`ResolvedReference`, and the orchestrator produces one
:class:`UploadOutcome` per submitted reference.  None of them outlive a
single run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from vaultpub.errors import VaultpubError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class EmbedKind(str, Enum):
    """The markup syntax an image reference was written in."""

    WIKI = "wiki"
    """Bracketed wiki embed: ``![[name.png|300]]``."""

    INLINE = "inline"
    """Inline Markdown image: ``![alt](path/to/name.png)``."""


# ---------------------------------------------------------------------------
# Pipeline records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImageReference:
    """One image embed discovered in the note text.

    Attributes
    ----------
    kind:
        Which embed syntax matched.
    display_name:
        The name as written in the markup (without any ``|`` suffix).
        Used as the upload file name.
    candidate_path:
        Vault-relative path used to locate the attachment.
    raw_span:
        The exact matched substring, including any sizing suffix.  This
        is the substitution key.
    """

    kind: EmbedKind
    display_name: str
    candidate_path: str
    raw_span: str


@dataclass(frozen=True)
class ResolvedReference:
    """An :class:`ImageReference` whose attachment was found.

    Attributes
    ----------
    reference:
        The original reference.
    resolved_path:
        Vault-relative path of the existing attachment.
    full_path:
        Fully qualified path of the attachment, handed to the uploader
        as context.
    """

    reference: ImageReference
    resolved_path: str
    full_path: str


@dataclass(frozen=True)
class UploadOutcome:
    """Result of uploading one :class:`ResolvedReference`.

    Exactly one of ``url`` and ``error`` is set.
    """

    reference: ResolvedReference
    url: str | None = None
    error: VaultpubError | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None


# ---------------------------------------------------------------------------
# Warnings and results
# ---------------------------------------------------------------------------

@dataclass
class PublishWarning:
    """A non-fatal issue encountered during a run.

    Attributes
    ----------
    code:
        A machine-readable code (an :class:`~vaultpub.errors.ErrorCode`
        value).
    message:
        The message shown to the user.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class RewriteResult:
    """Output of :meth:`DocumentRewriter.rewrite`.

    Attributes
    ----------
    document_text:
        Text with every successful reference substituted.  This is what
        gets written back into the note.
    output_text:
        Text handed to the terminal action; equals ``document_text``
        unless the properties block was stripped.
    substituted:
        Number of successful outcomes applied.
    deleted:
        Vault-relative paths of attachments that were deleted.
    """

    document_text: str
    output_text: str
    substituted: int = 0
    deleted: list[str] = field(default_factory=list)


@dataclass
class PublishResult:
    """Result of :meth:`ImagePublisher.run`.

    Attributes
    ----------
    action:
        The terminal action that was dispatched.
    references_found:
        Number of image references extracted from the note.
    images_uploaded:
        Number of successful upload outcomes.
    images_failed:
        Number of failed upload outcomes.
    halted_at:
        Candidate path of the first reference whose attachment was
        missing, or ``None`` if resolution ran to completion.
    document_replaced:
        Whether the note was overwritten.
    output_text:
        The text handed to the terminal action.
    warnings:
        Issues reported to the user during the run.
    """

    action: str
    references_found: int
    images_uploaded: int
    images_failed: int
    halted_at: str | None
    document_replaced: bool
    output_text: str
    warnings: list[PublishWarning] = field(default_factory=list)
