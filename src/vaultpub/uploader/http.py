"""HTTP image uploader.

Posts each image as ``multipart/form-data`` to a configurable endpoint
and reads the public URL out of the JSON response.  Works with the
common self-hosted image hosts (PicGo-style servers, Chevereto, custom
S3 front ends) that answer with something like::

    {"success": true, "data": {"url": "https://cdn.example.com/x/cat.png"}}

Failed uploads are never retried.
"""

from __future__ import annotations

import mimetypes
import time
from typing import Any

import httpx

from vaultpub.config import PublishConfig
from vaultpub.errors import VaultpubConfigError, VaultpubUploadTransportError
from vaultpub.observability import NoopMetricsHook, get_logger

log = get_logger("vaultpub.uploader")

_MAX_BODY_IN_ERROR = 500


def _lookup(body: Any, dotted_key: str) -> Any:
    """Follow *dotted_key* (``"data.url"``) through nested dicts and lists."""
    current = body
    for part in dotted_key.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:_MAX_BODY_IN_ERROR]
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if isinstance(body.get(key), str):
                return body[key]
    return response.text[:_MAX_BODY_IN_ERROR]


class HttpImageUploader:
    """Upload images with ``httpx.AsyncClient``.

    Parameters
    ----------
    config:
        Provides ``upload_url``, ``upload_token``, ``upload_field``,
        ``response_url_key``, ``timeout_seconds`` and ``http_proxy``.
    client:
        Optional pre-built client (tests inject one with a mock transport).
        When omitted the uploader owns its client and closes it in
        :meth:`close`.
    """

    def __init__(
        self,
        config: PublishConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.upload_url:
            raise VaultpubConfigError(
                message="upload_url is required for the HTTP uploader",
                context={"field": "upload_url", "value": config.upload_url},
            )
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        headers: dict[str, str] = {"Accept": "application/json"}
        if config.upload_token:
            headers["Authorization"] = f"Bearer {config.upload_token}"

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )
        if client is not None:
            self._client.headers.update(headers)

    # -- public API --------------------------------------------------------

    async def upload(self, data: bytes, name: str, context_path: str) -> str:
        """POST *data* and return the URL reported by the host.

        Raises
        ------
        VaultpubUploadTransportError
            On network errors, non-2xx responses, non-JSON bodies or a
            response without a URL.
        """
        url = self._config.upload_url
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        files = {self._config.upload_field: (name.rsplit("/", 1)[-1], data, content_type)}
        form = {"path": context_path}

        t0 = time.monotonic()
        try:
            response = await self._client.post(url, files=files, data=form)
        except httpx.HTTPError as exc:
            self._metrics.increment("vaultpub.http_requests_total", tags={"status": "error"})
            log.warning(
                "upload request failed",
                extra={"extra_fields": {"op": "upload", "name": name, "error": str(exc)}},
            )
            raise VaultpubUploadTransportError(
                message=str(exc) or type(exc).__name__,
                context={"url": url, "name": name},
                cause=exc,
            ) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        self._metrics.increment(
            "vaultpub.http_requests_total",
            tags={"status": str(response.status_code)},
        )
        log.debug(
            "upload response",
            extra={"extra_fields": {
                "op": "upload",
                "name": name,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            }},
        )

        if not response.is_success:
            raise VaultpubUploadTransportError(
                message=f"HTTP {response.status_code}: {_error_detail(response)}",
                context={
                    "url": url,
                    "name": name,
                    "status_code": response.status_code,
                    "body": response.text[:_MAX_BODY_IN_ERROR],
                },
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise VaultpubUploadTransportError(
                message="Image host returned a non-JSON response",
                context={
                    "url": url,
                    "name": name,
                    "status_code": response.status_code,
                    "body": response.text[:_MAX_BODY_IN_ERROR],
                },
                cause=exc,
            ) from exc

        remote_url = _lookup(body, self._config.response_url_key)
        if not isinstance(remote_url, str) or not remote_url:
            raise VaultpubUploadTransportError(
                message=(
                    f"Image host response has no URL at "
                    f"{self._config.response_url_key!r}"
                ),
                context={
                    "url": url,
                    "name": name,
                    "status_code": response.status_code,
                    "body": body,
                },
            )
        return remote_url

    async def close(self) -> None:
        """Close the underlying client if this uploader created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpImageUploader:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
