"""Internal utility helpers for vaultpub."""

from .paths import join_path, normalize_path

__all__ = [
    "join_path",
    "normalize_path",
]
