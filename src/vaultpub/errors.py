"""Full error hierarchy for vaultpub.

Every public error class inherits from VaultpubError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    CONFIG_ERROR = "CONFIG_ERROR"
    ASSET_NOT_FOUND = "ASSET_NOT_FOUND"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    UPLOAD_TRANSPORT_ERROR = "UPLOAD_TRANSPORT_ERROR"
    INVALID_ACTION = "INVALID_ACTION"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class VaultpubError(Exception):
    """Base exception for all vaultpub errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A user-facing description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class VaultpubConfigError(VaultpubError):
    """A :class:`PublishConfig` value is out of range or inconsistent.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Asset errors
# ---------------------------------------------------------------------------

class VaultpubAssetNotFoundError(VaultpubError):
    """The attachment backing an image reference does not exist.

    Raised by the resolver.  The publisher recovers from it by halting
    further resolution; uploads already submitted still complete.

    Context keys: ``name``, ``candidate_path``, ``resolved_path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ASSET_NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Upload errors
# ---------------------------------------------------------------------------

class VaultpubUploadError(VaultpubError):
    """Base class for failed uploads of a single image.

    The reference is excluded from substitution and deletion; sibling
    uploads are unaffected.

    Context keys: ``name``, ``path``.
    """

    def __init__(
        self,
        code: str = ErrorCode.UPLOAD_FAILED,
        message: str = "Upload failed",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class VaultpubUploadTransportError(VaultpubUploadError):
    """The remote image host could not be reached or answered with an error.

    Context keys: ``url``, ``status_code``, ``body``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Action errors
# ---------------------------------------------------------------------------

class VaultpubInvalidActionError(VaultpubError):
    """The requested terminal action is not known.  Not recoverable.

    Context keys: ``action``, ``allowed``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ACTION,
            message=message,
            context=context,
            cause=cause,
        )
