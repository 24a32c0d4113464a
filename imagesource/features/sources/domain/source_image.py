from typing import NamedTuple, Optional


class SourceImage(NamedTuple):
    """
    Image bytes plus the content type reported by whoever supplied them.

    Attributes:
        data (bytes): Complete image body
        content_type (Optional[str]): Bare mimetype (``image/png``), None when unknown
    """
    data: bytes
    content_type: Optional[str] = None


def bare_mimetype(header_value: Optional[str]) -> Optional[str]:
    """Strip parameters from a Content-Type value: ``image/png; q=1`` -> ``image/png``."""
    mimetype = (header_value or '').split(';')[0].strip().lower()
    return mimetype or None
