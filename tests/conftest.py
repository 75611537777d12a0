"""Shared test fixtures for the vaultpub test suite."""

from __future__ import annotations

import asyncio

import pytest

from vaultpub.config import PublishConfig
from vaultpub.utils.paths import normalize_path


class MemoryStore:
    """In-memory DocumentStore that records every call."""

    def __init__(self, files: dict[str, bytes] | None = None, text: str = "") -> None:
        self.files = {normalize_path(k): v for k, v in (files or {}).items()}
        self.text = text
        self.resolve_calls: list[str] = []
        self.exists_calls: list[str] = []
        self.read_calls: list[str] = []
        self.deleted: list[str] = []
        self.written: list[str] = []
        self.text_reads = 0

    async def resolve_attachment_path(self, candidate_path: str) -> str:
        self.resolve_calls.append(candidate_path)
        return normalize_path(candidate_path)

    async def exists(self, path: str) -> bool:
        self.exists_calls.append(path)
        return normalize_path(path) in self.files

    async def read_binary(self, path: str) -> bytes:
        self.read_calls.append(path)
        try:
            return self.files[normalize_path(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    async def delete(self, path: str) -> bool:
        self.deleted.append(path)
        return self.files.pop(normalize_path(path), None) is not None

    def full_path(self, path: str) -> str:
        return f"/vault/{normalize_path(path)}"

    async def get_active_document_text(self) -> str:
        self.text_reads += 1
        return self.text

    async def set_active_document_text(self, text: str) -> None:
        self.written.append(text)
        self.text = text


class FakeUploader:
    """Upload service returning ``<base>/<name>`` or a configured error.

    ``gates`` maps a name to an :class:`asyncio.Event` the upload waits on,
    so tests can control completion order.
    """

    def __init__(
        self,
        base_url: str = "https://cdn.test/x",
        errors: dict[str, Exception] | None = None,
        gates: dict[str, asyncio.Event] | None = None,
    ) -> None:
        self.base_url = base_url
        self.errors = errors or {}
        self.gates = gates or {}
        self.calls: list[tuple[bytes, str, str]] = []
        self.completed: list[str] = []

    async def upload(self, data: bytes, name: str, context_path: str) -> str:
        self.calls.append((data, name, context_path))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        self.completed.append(name)
        if name in self.errors:
            raise self.errors[name]
        return f"{self.base_url}/{name}"


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, int | None]] = []

    def notify(self, message: str, timeout_ms: int | None = None) -> None:
        self.messages.append((message, timeout_ms))


class RecordingClipboard:
    def __init__(self) -> None:
        self.texts: list[str] = []

    def write_text(self, text: str) -> None:
        self.texts.append(text)


@pytest.fixture
def config() -> PublishConfig:
    """Default test configuration."""
    return PublishConfig(attachment_location="assets")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def make_store():
    """Factory for :class:`MemoryStore` instances."""
    return MemoryStore


@pytest.fixture
def make_uploader():
    """Factory for :class:`FakeUploader` instances."""
    return FakeUploader
