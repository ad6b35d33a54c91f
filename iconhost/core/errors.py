"""Error kinds raised by the icon core.

Every error carries a short snake_case code as its message so the HTTP layer
can hand it straight back as the response detail.
"""
from typing import Optional


class IconError(Exception):
    def __init__(self, code: str, detail: Optional[str] = None):
        super().__init__(code)
        self.code = code
        self.detail = detail

    def __str__(self) -> str:
        return self.code


class ValidationError(IconError, ValueError):
    """Bad extension, oversize payload or a missing required field."""


class MalformedMultipartError(IconError, ValueError):
    """The request body is not a multipart body we can split."""


class DuplicateFileError(IconError, FileExistsError):
    """A file with the same sanitized name already exists in the category."""


class NotFoundError(IconError, LookupError):
    pass


class CompressionError(IconError, RuntimeError):
    """Codec failure while re-encoding. Always recovered by the caller."""
