"""Host collaborators: the vault holding the note, notices and clipboard.

Exports
-------
DocumentStore, Notifier, Clipboard
    Protocols the pipeline depends on.
FileSystemVault
    A :class:`DocumentStore` backed by a directory on disk.
LoggingNotifier
    Notifier that writes notices to the structured log.
StreamClipboard
    Clipboard stand-in writing to a text stream.
"""

from .base import Clipboard, DocumentStore, Notifier
from .filesystem import FileSystemVault
from .notices import LoggingNotifier, StreamClipboard

__all__ = [
    "Clipboard",
    "DocumentStore",
    "FileSystemVault",
    "LoggingNotifier",
    "Notifier",
    "StreamClipboard",
]
