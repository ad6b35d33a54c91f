import os
import re
from typing import Tuple

_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")


def sanitize(raw: str) -> str:
    """Lower-case `raw` and reduce it to `[a-z0-9-]` with single inner hyphens.

    May return an empty string; callers that need a usable name must reject it.
    """
    name = _INVALID_CHARS.sub("-", (raw or "").lower())
    name = _HYPHEN_RUNS.sub("-", name)
    return name.strip("-")


def split_extension(filename: str) -> Tuple[str, str]:
    """Return `(base, ext)` with the extension lower-cased, e.g. `("Logo", ".svg")`."""
    base, ext = os.path.splitext(os.path.basename(filename or ""))
    return base, ext.lower()
