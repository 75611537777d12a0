"""Upload service protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageUploader(Protocol):
    """Sends one image to a remote host and returns its public URL.

    Implementations raise :class:`~vaultpub.errors.VaultpubUploadError`
    (or any other exception) when the upload fails; the message is shown
    to the user.
    """

    async def upload(self, data: bytes, name: str, context_path: str) -> str:
        """Upload *data*.

        Parameters
        ----------
        data:
            Raw image bytes.
        name:
            File name the image was embedded under.
        context_path:
            Fully qualified local path of the attachment.
        """
        ...
