"""Image preparation for text recognition.

Receipts photographed from e-wallet dark mode screens are white text on a
dark background; recognizers expect dark text on a light background, so
dark images are inverted before recognition.
"""

import base64
import binascii
import io
import logging
import re
from pathlib import Path

from PIL import Image, ImageOps, ImageStat, UnidentifiedImageError

from strukscan.domain.extraction import ExtractionFailed

logger = logging.getLogger(__name__)

DARK_BACKGROUND_THRESHOLD = 128  # Mean luminance below this means inverted polarity
PREPROCESS_JPEG_QUALITY = 90
DEFAULT_MAX_WIDTH = 1200
DEFAULT_JPEG_QUALITY = 80

_DATA_URI = re.compile(r"^data:(?P<mime>[\w/+.-]*)(?P<params>(?:;[^,;]*)*),(?P<data>.*)$", re.DOTALL)

ImageSource = bytes | str | Path


def load_image_bytes(source: ImageSource) -> bytes:
    """
    Read an image source into bytes.

    Accepts raw bytes, a filesystem path, or a ``data:`` URI (base64).

    Raises:
        ExtractionFailed: if the source cannot be read
    """
    if isinstance(source, bytes):
        return source

    if isinstance(source, str) and source.startswith("data:"):
        match = _DATA_URI.match(source)
        if not match or ";base64" not in match.group("params"):
            raise ExtractionFailed("Unsupported data URI: expected base64 image data")
        try:
            return base64.b64decode(match.group("data"), validate=False)
        except (binascii.Error, ValueError) as e:
            raise ExtractionFailed(f"Invalid base64 image data: {e}") from e

    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as e:
        raise ExtractionFailed(f"Cannot read image {path}: {e}") from e


def mean_luminance(img: Image.Image) -> float:
    """Average of (R+G+B)/3 over all pixels."""
    stat = ImageStat.Stat(img.convert("RGB"))
    return sum(stat.mean) / 3


def invert_dark_background(img: Image.Image) -> Image.Image:
    """
    Invert R, G, B of a dark image, leaving alpha untouched.

    Images with mean luminance >= DARK_BACKGROUND_THRESHOLD are returned
    unchanged, so light receipts are never inverted.
    """
    if mean_luminance(img) >= DARK_BACKGROUND_THRESHOLD:
        return img

    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        alpha = rgba.getchannel("A")
        inverted = ImageOps.invert(rgba.convert("RGB"))
        inverted.putalpha(alpha)
        return inverted

    return ImageOps.invert(img.convert("RGB"))


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def preprocess_image_bytes(image_bytes: bytes, quality: int = PREPROCESS_JPEG_QUALITY) -> bytes:
    """
    Normalize receipt polarity to dark text on a light background.

    Best effort: images that cannot be decoded are passed through unmodified.

    Args:
        image_bytes: Image data as bytes
        quality: JPEG quality for the re-encoded image

    Returns:
        JPEG bytes, inverted if the image was dark, or the input on failure
    """
    try:
        img = Image.open(io.BytesIO(image_bytes))
        # Apply EXIF orientation so the recognizer sees the upright receipt
        img = ImageOps.exif_transpose(img)
        luminance = mean_luminance(img)
        if luminance < DARK_BACKGROUND_THRESHOLD:
            logger.debug("Dark image (mean luminance %.1f), inverting", luminance)
        return _encode_jpeg(invert_dark_background(img), quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning("Image preprocessing skipped: %s", e)
        return image_bytes


def compress_image_bytes(
    image_bytes: bytes,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Downscale image bytes to max_width (keeping aspect ratio) and re-encode as JPEG.

    Images narrower than max_width keep their size. Undecodable images are
    passed through unmodified.
    """
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img = ImageOps.exif_transpose(img)
        width, height = img.size
        if width > max_width:
            new_height = max(1, int(height * (max_width / width)))
            img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)
        return _encode_jpeg(img, quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning("Image compression skipped: %s", e)
        return image_bytes
