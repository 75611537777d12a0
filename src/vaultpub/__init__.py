"""vaultpub — publish notes whose images live in the local vault.

Finds the local images embedded in a Markdown note (``![[cat.png]]`` and
``![alt](assets/cat.png)``), uploads them concurrently to an image host
and rewrites every embed as ``![cat](https://...)``.

Public re-exports
-----------------

* **Pipeline:** :class:`ImagePublisher`, :func:`extract_references`,
  :class:`AssetResolver`, :class:`UploadOrchestrator`,
  :class:`DocumentRewriter`, :func:`dispatch`
* **Collaborators:** :class:`FileSystemVault`, :class:`HttpImageUploader`
* **Configuration:** :class:`PublishConfig`
* **Errors:** Every :class:`VaultpubError` subclass and :class:`ErrorCode`
* **Models:** Pipeline records and result types
"""

from __future__ import annotations

__version__ = "0.3.0"

# ── Configuration ───────────────────────────────────────────────────────
from vaultpub.config import PublishConfig
from vaultpub.dispatcher import ACTION_PUBLISH, dispatch

# ── Errors ──────────────────────────────────────────────────────────────
from vaultpub.errors import (
    ErrorCode,
    VaultpubAssetNotFoundError,
    VaultpubConfigError,
    VaultpubError,
    VaultpubInvalidActionError,
    VaultpubUploadError,
    VaultpubUploadTransportError,
)

# ── Pipeline ────────────────────────────────────────────────────────────
from vaultpub.matcher import IMAGE_EXTENSIONS, extract_references

# ── Models ──────────────────────────────────────────────────────────────
from vaultpub.models import (
    EmbedKind,
    ImageReference,
    PublishResult,
    PublishWarning,
    ResolvedReference,
    RewriteResult,
    UploadOutcome,
)
from vaultpub.orchestrator import UploadOrchestrator
from vaultpub.publisher import ImagePublisher
from vaultpub.resolver import AssetResolver
from vaultpub.rewriter import DocumentRewriter, strip_properties, substitute

# ── Collaborators ───────────────────────────────────────────────────────
from vaultpub.uploader import HttpImageUploader, ImageUploader
from vaultpub.vault import (
    Clipboard,
    DocumentStore,
    FileSystemVault,
    LoggingNotifier,
    Notifier,
    StreamClipboard,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    "__version__",
    # Pipeline
    "ImagePublisher",
    "extract_references",
    "IMAGE_EXTENSIONS",
    "AssetResolver",
    "UploadOrchestrator",
    "DocumentRewriter",
    "substitute",
    "strip_properties",
    "dispatch",
    "ACTION_PUBLISH",
    # Configuration
    "PublishConfig",
    # Collaborators
    "DocumentStore",
    "Notifier",
    "Clipboard",
    "FileSystemVault",
    "LoggingNotifier",
    "StreamClipboard",
    "ImageUploader",
    "HttpImageUploader",
    # Errors
    "VaultpubError",
    "ErrorCode",
    "VaultpubConfigError",
    "VaultpubAssetNotFoundError",
    "VaultpubUploadError",
    "VaultpubUploadTransportError",
    "VaultpubInvalidActionError",
    # Models
    "EmbedKind",
    "ImageReference",
    "ResolvedReference",
    "UploadOutcome",
    "PublishWarning",
    "RewriteResult",
    "PublishResult",
]
