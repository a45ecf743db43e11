"""Conversion of user-supplied image files into transport-safe payloads.

encode_image() is the single entry point used by the orchestrator:

1. Read the whole file (path, raw bytes or binary file object). Disk reads
   run in a worker thread via asyncio.to_thread so the event loop stays free.
2. Validate size (MAX_IMAGE_SIZE_MB) and detect the MIME type from magic
   bytes with filetype when the caller does not supply one.
3. Base-64 encode the raw bytes. The result carries no data: URI prefix.

Read failures raise ImageReadError and are not retried.
"""

import asyncio
import base64
import os
import re
from pathlib import Path
from typing import BinaryIO, Optional, Union

import filetype

from pantry_chef.errors import ImageReadError, UnsupportedImageError
from pantry_chef.models.models import EncodedImage
from pantry_chef.utils.config import config
from pantry_chef.utils.logger import logger

ImageSource = Union[str, os.PathLike, bytes, bytearray, BinaryIO]

# MIME types accepted by the Gemini vision models
SUPPORTED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
    "image/heif",
    "image/gif",
)

_DATA_URI_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)


def strip_data_uri(payload: str) -> str:
    """Return only the base-64 payload of a data: URI (plain payloads pass through)."""
    return _DATA_URI_PREFIX.sub("", payload.strip(), count=1)


def to_data_uri(data: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{strip_data_uri(data)}"


def _read_source(source: ImageSource) -> bytes:
    """Blocking read of the full image contents.

    Raises:
        OSError: If the platform read fails.
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        return Path(source).read_bytes()
    data = source.read()
    if isinstance(data, str):
        raise ImageReadError("Image file must be opened in binary mode")
    return data


def detect_mime_type(image_bytes: bytes) -> Optional[str]:
    """Detect the image MIME type from magic bytes, None if unknown."""
    kind = filetype.guess(image_bytes)
    if kind is None or not kind.mime.startswith("image/"):
        return None
    return kind.mime


def validate_image_size(image_bytes: bytes) -> None:
    """Reject images above MAX_IMAGE_SIZE_MB.

    Raises:
        UnsupportedImageError: If the image is too large.
    """
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        raise UnsupportedImageError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")


def resolve_mime_type(image_bytes: bytes, declared: Optional[str] = None) -> str:
    """Pick the MIME type to send: the declared one if supported, else the detected one.

    Raises:
        UnsupportedImageError: If the type is unknown or not accepted by the model.
    """
    mime_type = (declared or "").strip().lower()
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    # Upload forms often declare application/octet-stream; trust the content then
    if mime_type not in SUPPORTED_MIME_TYPES:
        mime_type = detect_mime_type(image_bytes)
    if mime_type not in SUPPORTED_MIME_TYPES:
        logger.warning(f"Invalid image format: {mime_type}")
        raise UnsupportedImageError(
            "Unsupported image format. Please upload a JPEG, PNG, WEBP, HEIC or GIF image."
        )
    return mime_type


async def encode_image(source: ImageSource, mime_type: Optional[str] = None) -> EncodedImage:
    """Read an image file and encode it for the generation service.

    Args:
        source: Path to the file, its raw bytes, a binary file object, or a
            data: URI string (whose prefix is stripped and payload decoded).
        mime_type: Declared MIME type (e.g. from an upload form). Detected
            from the content when omitted.

    Returns:
        EncodedImage with the base-64 payload and MIME type.

    Raises:
        ImageReadError: If the file cannot be read or is empty.
        UnsupportedImageError: If the image format or size is not accepted.
    """
    if isinstance(source, str) and source.startswith("data:"):
        header = source.split(",", 1)[0]
        mime_type = mime_type or header[len("data:"):].split(";", 1)[0] or None
        try:
            image_bytes = base64.b64decode(strip_data_uri(source), validate=True)
        except ValueError as e:
            raise ImageReadError(f"Failed to read image: invalid base64 data ({e})") from e
    else:
        try:
            image_bytes = await asyncio.to_thread(_read_source, source)
        except OSError as e:
            logger.warning(f"Image read failed: {e}")
            raise ImageReadError(f"Failed to read image file: {e.strerror or e}") from e

    if not image_bytes:
        raise ImageReadError("Failed to read image file: the file is empty")

    validate_image_size(image_bytes)
    resolved = resolve_mime_type(image_bytes, mime_type)
    encoded = base64.b64encode(image_bytes).decode("ascii")

    logger.debug(f"Encoded {resolved} image: {len(image_bytes) / 1024:.1f}KB raw, {len(encoded) / 1024:.1f}KB base64")
    return EncodedImage(data=encoded, mime_type=resolved)
