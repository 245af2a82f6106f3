"""Checks applied to uploaded images and image URLs before analysis."""

import os
import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

ALLOWED_IMAGE_HOSTS = (
    "picsum.photos",
    "images.unsplash.com",
    "source.unsplash.com",
    "via.placeholder.com",
    "loremflickr.com",
)


class UploadError(ValueError):
    """Raised when an uploaded image is rejected."""


def is_valid_image_url(url: str) -> bool:
    """
    Check that an image URL points at one of the allowed image hosts.

    Matching is by substring of the hostname, so subdomains of an allowed
    host are accepted.
    """
    try:
        hostname = urlparse(url).hostname
    except (TypeError, ValueError, AttributeError):
        return False
    if not hostname:
        return False
    return any(domain in hostname for domain in ALLOWED_IMAGE_HOSTS)


def validate_upload(data: bytes, mimetype: str,
                    max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """
    Reject uploads that are not images or exceed the size limit.

    Raises:
        UploadError: With a user-facing message.
    """
    if not mimetype or not mimetype.startswith("image/"):
        raise UploadError("Only image files are allowed!")
    if not data:
        raise UploadError("Please provide an image file or URL")
    if len(data) > max_bytes:
        raise UploadError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )
    logger.debug(f"Accepted upload: {mimetype}, {len(data)} bytes")


def validate_image_url(url: str) -> None:
    """
    Reject image URLs outside the allowed hosts.

    Raises:
        UploadError: With a user-facing message.
    """
    if not is_valid_image_url(url):
        raise UploadError(
            "Invalid image URL. Please provide a direct link to an image file."
        )
