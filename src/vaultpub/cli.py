"""vaultpub CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer

from vaultpub.config import PublishConfig
from vaultpub.dispatcher import ACTION_PUBLISH
from vaultpub.errors import VaultpubConfigError, VaultpubInvalidActionError
from vaultpub.models import PublishResult
from vaultpub.observability.logger import DEFAULT_LEVEL, configure_logging
from vaultpub.publisher import ImagePublisher
from vaultpub.uploader.http import HttpImageUploader
from vaultpub.vault.filesystem import FileSystemVault
from vaultpub.vault.notices import StreamClipboard

app = typer.Typer(
    name="vaultpub",
    help="vaultpub: upload the local images of a note and publish it",
    no_args_is_help=True,
)


class EchoNotifier:
    """Print notices to stderr."""

    def notify(self, message: str, timeout_ms: int | None = None) -> None:
        typer.echo(typer.style(message, fg=typer.colors.YELLOW), err=True)


def version_callback(value: bool) -> None:
    if value:
        from vaultpub import __version__

        typer.echo(f"vaultpub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log progress (INFO) as JSON lines on stderr."
    ),
) -> None:
    """vaultpub: upload the local images of a note and publish it."""
    configure_logging(logging.INFO if verbose else DEFAULT_LEVEL)


@app.command(name="publish")
def publish_command(
    note: Path = typer.Argument(help="Note to publish, relative to the vault or absolute."),
    vault: Path = typer.Option(Path("."), "--vault", help="Vault root directory."),
    attachments: str = typer.Option(
        "assets", "--attachments", help="Attachment directory inside the vault."
    ),
    upload_url: str = typer.Option(
        ..., "--upload-url", envvar="VAULTPUB_UPLOAD_URL", help="Image host endpoint."
    ),
    token: str = typer.Option(
        "", "--token", envvar="VAULTPUB_UPLOAD_TOKEN", help="Bearer token for the image host."
    ),
    field: str = typer.Option("file", "--field", help="Multipart field carrying the image."),
    url_key: str = typer.Option(
        "url", "--url-key", help="Dotted path of the URL in the host's JSON response."
    ),
    alt_text: bool = typer.Option(
        True, "--alt-text/--no-alt-text", help="Derive alt text from file names."
    ),
    delete_attachments: bool = typer.Option(
        False, "--delete-attachments", help="Delete attachments once uploaded."
    ),
    replace: bool = typer.Option(False, "--replace", help="Rewrite the note in place."),
    ignore_properties: bool = typer.Option(
        False, "--ignore-properties", help="Drop the properties block from the output."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the output here instead of stdout."
    ),
    action: str = typer.Option(ACTION_PUBLISH, "--action", help="Terminal action."),
) -> None:
    """Upload the images embedded in NOTE and publish the rewritten text."""
    try:
        config = PublishConfig(
            attachment_location=attachments,
            image_alt_text=alt_text,
            delete_attachments=delete_attachments,
            replace_original_doc=replace,
            ignore_properties=ignore_properties,
            upload_url=upload_url,
            upload_token=token,
            upload_field=field,
            response_url_key=url_key,
        )
    except VaultpubConfigError as e:
        typer.echo(typer.style(f"Invalid configuration: {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(code=1) from e

    store = FileSystemVault(vault, note)
    if store.document is None or not store.document.is_file():
        typer.echo(typer.style(f"Note does not exist: {note}", fg=typer.colors.RED), err=True)
        raise typer.Exit(code=1)

    try:
        result = asyncio.run(_publish(store, config, action, output))
    except VaultpubInvalidActionError as e:
        typer.echo(typer.style(str(e), fg=typer.colors.RED), err=True)
        raise typer.Exit(code=1) from e

    summary = (
        f"{result.references_found} reference(s): {result.images_uploaded} uploaded, "
        f"{result.images_failed} failed"
    )
    if result.halted_at is not None:
        summary += f", stopped at missing {result.halted_at}"
    typer.echo(summary, err=True)


async def _publish(
    store: FileSystemVault,
    config: PublishConfig,
    action: str,
    output: Path | None,
) -> PublishResult:
    async with ImagePublisher(
        store,
        HttpImageUploader(config),
        config,
        notifier=EchoNotifier(),
        clipboard=_OutputClipboard(output) if output else StreamClipboard(),
    ) as publisher:
        return await publisher.run(action)


class _OutputClipboard:
    def __init__(self, path: Path) -> None:
        self._path = path

    def write_text(self, text: str) -> None:
        self._path.write_text(text, encoding="utf-8")
