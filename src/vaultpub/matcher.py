"""Image reference extraction.

Finds the two embed syntaxes a note may use for local images:

* wiki embeds ``![[name.png]]`` (optionally ``![[name.png|300]]``),
  looked up in the configured attachment directory;
* inline Markdown images ``![alt](path/to/name.png)``, whose path is
  used as written (after percent-decoding).

Remote inline images (``http://`` / ``https://``) are already published
and are never returned.  Pure text processing, no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import unquote

from vaultpub.models import EmbedKind, ImageReference
from vaultpub.utils.paths import join_path

IMAGE_EXTENSIONS = frozenset({
    "png", "jpg", "jpeg", "gif", "svg", "webp", "excalidraw",
})
"""File extensions recognised as embeddable images.  Case-sensitive."""

# Excalidraw drawings are embedded through their rendered PNG sibling.
EXCALIDRAW_EXTENSION = "excalidraw"
EXCALIDRAW_RENDER_SUFFIX = ".png"

_EXT_ALTERNATION = "|".join(sorted(IMAGE_EXTENSIONS, key=len, reverse=True))

# ![[<name>.<ext>]] or ![[<name>.<ext>|<size or alias>]]
_WIKI_RE = re.compile(
    r"!\[\["
    r"(?P<name>[^\]|\n]*?\.(?P<ext>" + _EXT_ALTERNATION + r"))"
    r"(?:\|[^\]\n]*)?"
    r"\]\]"
)

# ![<alt>](<path>.<ext>); the path may hold one level of balanced parentheses
_INLINE_RE = re.compile(
    r"!\[(?P<alt>[^\]\n]*)\]"
    r"\((?P<path>(?:[^()\n]|\([^()\n]*\))*?\.(?P<ext>" + _EXT_ALTERNATION + r"))\)"
)

_REMOTE_PREFIXES = ("http://", "https://")

# Escapes of URI reserved characters (%2F, %23, %3F, ...) stay encoded.
_RESERVED_ESCAPE_RE = re.compile(r"%(?:2[346BCF]|3[ABDF]|40)", re.IGNORECASE)


def decode_path(path: str) -> str:
    """Percent-decode *path*, keeping reserved-character escapes.

    >>> decode_path("my%20pics/a%2Fb.png")
    'my pics/a%2Fb.png'
    """
    return unquote(_RESERVED_ESCAPE_RE.sub(lambda m: "%25" + m.group(0)[1:], path))


def extract_references(text: str, attachment_dir: str) -> list[ImageReference]:
    """Return every local image reference in *text*.

    Wiki embeds come first, then inline images; each group keeps its own
    left-to-right order.  Identical embeds appearing several times yield
    one reference each.

    Parameters
    ----------
    text:
        The note text.
    attachment_dir:
        Vault-relative attachment directory used for wiki embeds.

    Returns
    -------
    list[ImageReference]
    """
    if not text:
        return []
    return [*_scan_wiki(text, attachment_dir), *_scan_inline(text)]


def _scan_wiki(text: str, attachment_dir: str) -> Iterator[ImageReference]:
    for match in _WIKI_RE.finditer(text):
        name = match.group("name")
        file_name = name
        if match.group("ext") == EXCALIDRAW_EXTENSION:
            file_name = name + EXCALIDRAW_RENDER_SUFFIX
        yield ImageReference(
            kind=EmbedKind.WIKI,
            display_name=name,
            candidate_path=join_path(attachment_dir, file_name),
            raw_span=match.group(0),
        )


def _scan_inline(text: str) -> Iterator[ImageReference]:
    for match in _INLINE_RE.finditer(text):
        path = match.group("path")
        if path.startswith(_REMOTE_PREFIXES):
            continue
        decoded = decode_path(path)
        yield ImageReference(
            kind=EmbedKind.INLINE,
            display_name=decoded,
            candidate_path=decoded,
            raw_span=match.group(0),
        )
