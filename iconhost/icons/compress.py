"""Lossy re-encoding for raster icons with Pillow.

SVG and ICO are never touched. Any codec failure falls back to the original
bytes so compression can never fail an upload.
"""

import logging
from io import BytesIO
from PIL import Image

from ..core.errors import CompressionError

logger = logging.getLogger(__name__)

COMPRESSIBLE_FORMATS = {".png", ".jpg", ".jpeg", ".webp"}

QUALITY = 80


def is_compressible(extension: str) -> bool:
    return (extension or "").lower() in COMPRESSIBLE_FORMATS


def _encode_png(img: Image.Image) -> bytes:
    # Adaptive palette keeps roughly 80% perceived quality at a fraction of the size.
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        quantized = img.convert("RGBA").quantize(colors=256, method=Image.Quantize.FASTOCTREE)
    else:
        quantized = img.convert("RGB").quantize(colors=256)
    buf = BytesIO()
    quantized.save(buf, format="PNG", optimize=True, compress_level=9)
    return buf.getvalue()


def _encode_jpeg(img: Image.Image) -> bytes:
    buf = BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=QUALITY, optimize=True, progressive=True)
    return buf.getvalue()


def _encode_webp(img: Image.Image) -> bytes:
    buf = BytesIO()
    img.save(buf, format="WEBP", quality=QUALITY, method=6)
    return buf.getvalue()


_ENCODERS = {
    ".png": _encode_png,
    ".jpg": _encode_jpeg,
    ".jpeg": _encode_jpeg,
    ".webp": _encode_webp,
}


def _recompress(data: bytes, extension: str) -> bytes:
    encoder = _ENCODERS[extension]
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            out = encoder(img)
        # Make sure what we produced is still a readable image
        with Image.open(BytesIO(out)) as check:
            check.verify()
    except Exception as e:
        raise CompressionError("compression_failed", str(e)) from e
    return out


def compress(data: bytes, extension: str) -> bytes:
    """Re-encode `data` for `extension`, or return it unchanged.

    Output that is not smaller than the input is discarded as well.
    """
    ext = (extension or "").lower()
    if ext not in COMPRESSIBLE_FORMATS:
        return data
    try:
        out = _recompress(data, ext)
    except CompressionError as e:
        logger.warning("Compression of %s payload failed, keeping original: %s", ext, e.detail)
        return data
    if len(out) >= len(data):
        logger.debug("Compressed %s payload not smaller (%d >= %d), keeping original", ext, len(out), len(data))
        return data
    return out
