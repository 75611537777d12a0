"""Vault path normalisation.

Vault paths are always ``/``-separated, relative to the vault root, and
carry no leading or trailing slash.  The vault root itself is ``"/"``.
"""

from __future__ import annotations

import re
import unicodedata

_SEPARATORS_RE = re.compile(r"[\\/]+")


def normalize_path(path: str) -> str:
    """Return *path* in canonical vault form.

    Backslashes and runs of slashes collapse to a single ``/``, ``.``
    segments are dropped, leading and trailing slashes are removed,
    non-breaking spaces become plain spaces and the result is NFC
    normalised.  An empty result maps to ``"/"``.

    >>> normalize_path("assets//img\\\\cat.png")
    'assets/img/cat.png'
    >>> normalize_path("./assets/")
    'assets'
    """
    path = path.replace("\u00a0", " ").replace("\u202f", " ")
    segments = [s for s in _SEPARATORS_RE.split(path) if s and s != "."]
    if not segments:
        return "/"
    return unicodedata.normalize("NFC", "/".join(segments))


def join_path(*parts: str) -> str:
    """Join vault path *parts* and normalise the result."""
    return normalize_path("/".join(p for p in parts if p and p != "/"))
