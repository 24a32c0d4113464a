"""
Error taxonomy for image sources.

Every failure of a source is raised as an ImageSourceError subclass so the
HTTP layer can map it to a response without string matching.
"""
from typing import Optional


class ImageSourceError(Exception):
    """Base class for all image source failures."""


class InvalidURLError(ImageSourceError):
    def __init__(self, url: Optional[str], reason: str = "invalid"):
        self.url = url
        self.reason = reason
        if not url:
            message = "Missing remote image URL"
        else:
            message = f"Invalid remote image URL ({reason}): {url}"
        super().__init__(message)


class OriginNotAllowedError(ImageSourceError):
    """Raised when the target URL's origin is not in the allow-list.

    The message format is relied upon by callers and must not change.
    """

    def __init__(self, host: str):
        self.host = host
        super().__init__(f"Not allowed remote URL origin: {host}")


class TransportError(ImageSourceError):
    def __init__(self, url: str, cause: Exception):
        self.url = url
        self.cause = cause
        super().__init__(f"Error fetching remote image {url}: {cause}")


class UpstreamError(ImageSourceError):
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Remote image server responded with status {status_code}: {url}")


class ResponseTooLargeError(ImageSourceError):
    def __init__(self, limit: int, url: Optional[str] = None):
        self.url = url
        self.limit = limit
        message = f"Image exceeds the maximum allowed size of {limit} bytes"
        if url:
            message += f": {url}"
        super().__init__(message)


class InvalidPayloadError(ImageSourceError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid image payload: {reason}")
