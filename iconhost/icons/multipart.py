"""Minimal multipart/form-data splitter for the upload form.

Handles a single boundary with flat parts (one file plus text fields), which is
all the gallery form ever sends. Nested multiparts, transfer encodings and
RFC 2231 parameters are not supported.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.errors import MalformedMultipartError

_HEADER_DIVIDER = b"\r\n\r\n"
_NAME_RE = re.compile(r'(?<![a-zA-Z*])name="([^"]+)"')
_FILENAME_RE = re.compile(r'filename="([^"]+)"')
_BOUNDARY_RE = re.compile(r'boundary=(?:"([^"]+)"|([^;\s]+))', re.IGNORECASE)


@dataclass
class MultipartPart:
    name: str
    filename: Optional[str]
    data: bytes
    value: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.filename is not None


def boundary_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """Pull the boundary token out of a `multipart/form-data` Content-Type header."""
    if not content_type or "multipart/form-data" not in content_type.lower():
        return None
    match = _BOUNDARY_RE.search(content_type)
    if not match:
        return None
    return match.group(1) or match.group(2)


def _parse_part(segment: bytes) -> Optional[MultipartPart]:
    header_end = segment.find(_HEADER_DIVIDER)
    if header_end == -1:
        return None

    headers = segment[:header_end].decode("utf-8", errors="replace")
    data = segment[header_end + len(_HEADER_DIVIDER):]

    name_match = _NAME_RE.search(headers)
    if not name_match:
        return None
    filename_match = _FILENAME_RE.search(headers)

    if filename_match:
        # File bytes are kept exactly as sent.
        return MultipartPart(name=name_match.group(1), filename=filename_match.group(1), data=data)
    return MultipartPart(
        name=name_match.group(1),
        filename=None,
        data=data,
        value=data.decode("utf-8", errors="replace").strip(),
    )


def parse(body: bytes, boundary: str) -> List[MultipartPart]:
    """Split `body` into named parts.

    Raises MalformedMultipartError when either the opening `--boundary` or the
    closing `--boundary--` marker is missing. Sub-parts without a header block
    or without a `name` attribute are dropped.
    """
    if not boundary:
        raise MalformedMultipartError("invalid_multipart", "missing boundary")

    opening = b"--" + boundary.encode("latin-1")
    closing = opening + b"--"
    separator = b"\r\n" + opening

    start = body.find(opening)
    end = body.find(closing)
    if start == -1 or end == -1:
        raise MalformedMultipartError("invalid_multipart", "boundary markers not found")

    region = body[start + len(opening):end]
    # The CRLF before the closing marker belongs to the delimiter, not the last part.
    if region.endswith(b"\r\n"):
        region = region[:-2]

    parts: List[MultipartPart] = []
    # split() also yields the segment after the last separator
    for segment in region.split(separator):
        part = _parse_part(segment)
        if part is not None:
            parts.append(part)
    return parts


def fields_of(parts: List[MultipartPart]) -> Dict[str, str]:
    """Map field name -> value for text parts; the first occurrence wins."""
    fields: Dict[str, str] = {}
    for part in parts:
        if not part.is_file and part.name not in fields:
            fields[part.name] = part.value or ""
    return fields


def first_file(parts: List[MultipartPart], name: str = "file") -> Optional[MultipartPart]:
    for part in parts:
        if part.is_file and part.name == name:
            return part
    return None
