"""Upload services.

Exports
-------
ImageUploader
    Protocol every upload service satisfies.
HttpImageUploader
    Multipart HTTP uploader built on ``httpx``.
"""

from .base import ImageUploader
from .http import HttpImageUploader

__all__ = [
    "HttpImageUploader",
    "ImageUploader",
]
