"""Tests for the directory-backed vault and the default notices/clipboard."""

from __future__ import annotations

import io

import pytest

from vaultpub.vault import (
    Clipboard,
    DocumentStore,
    FileSystemVault,
    LoggingNotifier,
    Notifier,
    StreamClipboard,
)


@pytest.fixture
def vault_dir(tmp_path):
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "cat.png").write_bytes(b"\x89PNG")
    (tmp_path / "note.md").write_text("![[cat.png]]", encoding="utf-8")
    return tmp_path


class TestProtocols:
    def test_satisfies_protocols(self, vault_dir):
        assert isinstance(FileSystemVault(vault_dir, "note.md"), DocumentStore)
        assert isinstance(LoggingNotifier(), Notifier)
        assert isinstance(StreamClipboard(), Clipboard)


class TestAttachmentPaths:
    @pytest.mark.asyncio
    async def test_free_candidate_returned(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert await vault.resolve_attachment_path("assets/dog.png") == "assets/dog.png"

    @pytest.mark.asyncio
    async def test_taken_candidate_gets_numbered_sibling(self, vault_dir):
        (vault_dir / "assets" / "cat 1.png").write_bytes(b"x")
        vault = FileSystemVault(vault_dir)
        assert await vault.resolve_attachment_path("assets/cat.png") == "assets/cat 2.png"

    @pytest.mark.asyncio
    async def test_root_level_candidate(self, vault_dir):
        (vault_dir / "top.png").write_bytes(b"x")
        vault = FileSystemVault(vault_dir)
        assert await vault.resolve_attachment_path("./top.png") == "top 1.png"

    def test_full_path(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert vault.full_path("assets/cat.png") == str(vault_dir.resolve() / "assets" / "cat.png")

    def test_escape_rejected(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        with pytest.raises(ValueError, match="escapes vault root"):
            vault.full_path("../outside.png")


class TestFileOperations:
    @pytest.mark.asyncio
    async def test_exists(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert await vault.exists("assets/cat.png") is True
        assert await vault.exists("assets/none.png") is False
        assert await vault.exists("assets") is False

    @pytest.mark.asyncio
    async def test_exists_outside_vault_is_false(self, vault_dir):
        vault = FileSystemVault(vault_dir / "assets")
        assert await vault.exists("../note.md") is False

    @pytest.mark.asyncio
    async def test_read_binary(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert await vault.read_binary("assets/cat.png") == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_delete(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert await vault.delete("assets/cat.png") is True
        assert not (vault_dir / "assets" / "cat.png").exists()
        assert await vault.delete("assets/cat.png") is False


class TestActiveDocument:
    @pytest.mark.asyncio
    async def test_read_and_write(self, vault_dir):
        vault = FileSystemVault(vault_dir, "note.md")
        assert await vault.get_active_document_text() == "![[cat.png]]"

        await vault.set_active_document_text("rewritten")

        assert (vault_dir / "note.md").read_text(encoding="utf-8") == "rewritten"

    @pytest.mark.asyncio
    async def test_absolute_document_path(self, vault_dir):
        vault = FileSystemVault(vault_dir, vault_dir / "note.md")
        assert vault.document == (vault_dir / "note.md").resolve()

    @pytest.mark.asyncio
    async def test_no_document(self, vault_dir):
        vault = FileSystemVault(vault_dir)
        assert await vault.get_active_document_text() == ""
        with pytest.raises(RuntimeError):
            await vault.set_active_document_text("x")


class TestNoticesAndClipboard:
    def test_logging_notifier_keeps_messages(self):
        notifier = LoggingNotifier()
        notifier.notify("hello", 5000)
        assert notifier.messages == ["hello"]

    def test_stream_clipboard_writes(self):
        buf = io.StringIO()
        StreamClipboard(buf).write_text("published")
        assert buf.getvalue() == "published"
