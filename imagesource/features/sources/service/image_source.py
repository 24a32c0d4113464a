"""
Image source contract and registry.

A source decides from the inbound request whether it can provide the image
(`matches`) and then produces the raw bytes (`get_image`), or the bytes plus
the content type the supplier declared (`fetch_image`). The registry picks
the first source that matches, in registration order.
"""
from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable

from werkzeug.wrappers import Request

from imagesource.features.sources.domain.source_image import SourceImage

from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ImageSource(Protocol):
    """Minimal contract every image source implements."""

    name: str

    def matches(self, request: Request) -> bool:
        ...

    def get_image(self, request: Request) -> bytes:
        ...

    def fetch_image(self, request: Request) -> SourceImage:
        ...


class SourceRegistry:
    def __init__(self, sources: Iterable[ImageSource]):
        self._sources: Tuple[ImageSource, ...] = tuple(sources)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(source.name for source in self._sources)

    def match(self, request: Request) -> Optional[ImageSource]:
        """Return the first source able to serve the request, or None."""
        for source in self._sources:
            if source.matches(request):
                logger.debug("Image source matched", extra={"source": source.name})
                return source
        return None
