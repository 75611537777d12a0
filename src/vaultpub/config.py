"""Configuration for vaultpub.

:class:`PublishConfig` is a plain dataclass that captures every tuneable
knob of the publishing pipeline and the bundled HTTP uploader.  Instances
are passed to :class:`~vaultpub.publisher.ImagePublisher` and
:class:`~vaultpub.uploader.http.HttpImageUploader`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from vaultpub.errors import VaultpubConfigError

DEFAULT_NOTICE_TIMEOUT_MS = 10_000
"""How long user-visible warnings stay on screen."""


@dataclass
class PublishConfig:
    """Complete configuration for a publishing run.

    Every parameter has a default, so ``PublishConfig()`` is a valid
    configuration for the pipeline.  The HTTP uploader additionally
    needs ``upload_url``.

    Parameters
    ----------
    attachment_location:
        Vault-relative directory holding attachments.  Wiki-style
        embeds (``![[name.png]]``) are looked up in this directory.
    image_alt_text:
        Derive alt text from the image file name (``my-cat.png`` ->
        ``my cat``).  When off, substituted images get an empty alt text.
    delete_attachments:
        Delete the local attachment once its reference has been
        substituted with the remote URL.
    replace_original_doc:
        Write the rewritten text back into the active note.
    ignore_properties:
        Strip the leading ``---`` properties block from the emitted
        output.  The note written back keeps it.
    upload_url:
        Endpoint of the image host.  Must use HTTPS unless it targets
        localhost.
    upload_token:
        Optional bearer token sent to the image host.  Never logged.
    upload_field:
        Name of the multipart field carrying the image bytes.
    response_url_key:
        Dotted path of the URL inside the host's JSON response, e.g.
        ``"data.link"``.
    timeout_seconds:
        HTTP timeout for a single upload.  ``None`` waits forever.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    notice_timeout_ms:
        Display time of user-visible warnings.
    metrics:
        Optional :class:`~vaultpub.observability.MetricsHook` backend.
    """

    # ── Pipeline ────────────────────────────────────────────────────────
    attachment_location: str = "assets"

    image_alt_text: bool = True

    delete_attachments: bool = False

    replace_original_doc: bool = False

    ignore_properties: bool = False

    # ── Uploader ────────────────────────────────────────────────────────
    upload_url: str = ""

    upload_token: str = ""

    upload_field: str = "file"

    response_url_key: str = "url"

    timeout_seconds: float | None = 60.0

    http_proxy: str | None = None

    # ── Notices ─────────────────────────────────────────────────────────
    notice_timeout_ms: int = DEFAULT_NOTICE_TIMEOUT_MS

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.upload_url:
            parsed = urlparse(self.upload_url)
            if parsed.scheme not in ("http", "https"):
                raise VaultpubConfigError(
                    message=f"upload_url must be an http(s) URL, got {self.upload_url!r}",
                    context={"field": "upload_url", "value": self.upload_url},
                )
            if parsed.scheme == "http" and parsed.hostname not in (
                "localhost",
                "127.0.0.1",
                "::1",
            ):
                raise VaultpubConfigError(
                    message=(
                        f"upload_url uses insecure HTTP for non-local host "
                        f"'{parsed.hostname}'. Use HTTPS, or target localhost for testing."
                    ),
                    context={"field": "upload_url", "value": self.upload_url},
                )

        if not self.upload_field:
            raise VaultpubConfigError(
                message="upload_field must not be empty",
                context={"field": "upload_field", "value": self.upload_field},
            )
        if not self.response_url_key:
            raise VaultpubConfigError(
                message="response_url_key must not be empty",
                context={"field": "response_url_key", "value": self.response_url_key},
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise VaultpubConfigError(
                message=f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                context={"field": "timeout_seconds", "value": self.timeout_seconds},
            )
        if self.notice_timeout_ms < 0:
            raise VaultpubConfigError(
                message=f"notice_timeout_ms must be >= 0, got {self.notice_timeout_ms}",
                context={"field": "notice_timeout_ms", "value": self.notice_timeout_ms},
            )

    def __repr__(self) -> str:
        """Mask the upload token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "upload_token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"upload_token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"PublishConfig({', '.join(parts)})"
