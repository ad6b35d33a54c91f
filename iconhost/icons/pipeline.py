import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..core.errors import ValidationError
from ..core.models import DeleteResult, UploadResult
from .compress import compress as default_compressor, is_compressible
from .naming import sanitize, split_extension
from .store import CUSTOM_CONTAINER, CategoryStore

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 50 * 1024 * 1024


@dataclass
class UploadRequest:
    file_bytes: bytes
    original_filename: str
    category: str
    custom_folder: Optional[str] = None
    description: str = ""
    compress: bool = True
    custom_name: Optional[str] = None


class UploadPipeline:
    """Validate, name, optionally compress and persist one uploaded icon."""

    def __init__(
        self,
        store: CategoryStore,
        *,
        url_for: Optional[Callable[[str, str], str]] = None,
        max_file_size: int = MAX_FILE_SIZE,
        supported_formats: Optional[Iterable[str]] = None,
        compressor: Callable[[bytes, str], bytes] = default_compressor,
    ):
        self.store = store
        self.url_for = url_for or store.url_for
        self.max_file_size = max_file_size
        self.supported_formats = (
            {f.lower() for f in supported_formats} if supported_formats is not None else store.supported_formats
        )
        self.compressor = compressor

    def validate(self, req: UploadRequest) -> str:
        """Check the request and return the lower-cased file extension."""
        if not req.category:
            raise ValidationError("missing_category")
        _, ext = split_extension(req.original_filename)
        if ext not in self.supported_formats:
            raise ValidationError(
                "unsupported_format",
                f"Unsupported format: {ext or '(none)'}. Supported: {', '.join(sorted(self.supported_formats))}",
            )
        if req.file_bytes is None or len(req.file_bytes) > self.max_file_size:
            size = len(req.file_bytes or b"")
            raise ValidationError(
                "file_too_large",
                f"File too large: {size / (1024 * 1024):.2f}MB. Max: {self.max_file_size / (1024 * 1024):g}MB",
            )
        if req.category == CUSTOM_CONTAINER and not (req.custom_folder or "").strip():
            raise ValidationError("missing_custom_folder")
        return ext

    def final_category(self, req: UploadRequest) -> str:
        if req.category != CUSTOM_CONTAINER:
            return req.category
        slug = sanitize(req.custom_folder)
        if not slug:
            raise ValidationError("invalid_name", f"Folder name {req.custom_folder!r} has no usable characters")
        return f"{CUSTOM_CONTAINER}/{slug}"

    def final_name(self, req: UploadRequest, ext: str) -> str:
        base, _ = split_extension(req.original_filename)
        name = sanitize(req.custom_name or base)
        if not name:
            raise ValidationError("invalid_name", f"File name {req.original_filename!r} has no usable characters")
        return name + ext

    def upload(self, req: UploadRequest) -> UploadResult:
        ext = self.validate(req)
        category = self.final_category(req)
        file_name = self.final_name(req, ext)

        self.store.ensure_directory(self.store.resolve_category_path(category))

        data = req.file_bytes
        original_size = len(data)
        if req.compress and is_compressible(ext):
            data = self.compressor(data, ext)

        self.store.place_file(category, file_name, data)
        logger.info(
            "Stored %s in %s (%d -> %d bytes)", file_name, category, original_size, len(data)
        )

        return UploadResult(
            file_name=file_name,
            category=category,
            original_size=original_size,
            compressed_size=len(data),
            compressed=len(data) != original_size,
            description=req.description or None,
            url=self.url_for(category, file_name),
        )


def delete_icon(store: CategoryStore, file_name: str, category: str) -> DeleteResult:
    """Remove a stored icon. Values are expected to come from a listing or upload result."""
    store.remove_file(category, file_name)
    logger.info("Deleted %s from %s", file_name, category)
    return DeleteResult(message=f"File {file_name} deleted successfully")
