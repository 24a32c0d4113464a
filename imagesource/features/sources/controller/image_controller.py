from flask import request, Response
from imagesource.common.base.base_controller import BaseController
from imagesource.features.sources.domain.errors import (
    ImageSourceError,
    InvalidPayloadError,
    InvalidURLError,
    OriginNotAllowedError,
    ResponseTooLargeError,
    TransportError,
    UpstreamError,
)
from imagesource.features.sources.domain.source_image import SourceImage
from imagesource.features.sources.service.image_source import SourceRegistry
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

ERROR_STATUS = {
    InvalidURLError: 400,
    InvalidPayloadError: 400,
    OriginNotAllowedError: 403,
    ResponseTooLargeError: 413,
    TransportError: 502,
    UpstreamError: 502,
}

# (signature, offset, mimetype)
IMAGE_SIGNATURES = (
    (b'\xff\xd8\xff', 0, 'image/jpeg'),
    (b'\x89PNG\r\n\x1a\n', 0, 'image/png'),
    (b'GIF87a', 0, 'image/gif'),
    (b'GIF89a', 0, 'image/gif'),
    (b'WEBP', 8, 'image/webp'),
    (b'II*\x00', 0, 'image/tiff'),
    (b'MM\x00*', 0, 'image/tiff'),
    (b'BM', 0, 'image/bmp'),
)


def sniff_mimetype(data: bytes) -> str:
    for signature, offset, mimetype in IMAGE_SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return mimetype
    return 'application/octet-stream'


def response_mimetype(image: SourceImage) -> str:
    # Trust a declared image/* type; anything else is sniffed from the bytes
    if image.content_type and image.content_type.startswith('image/'):
        return image.content_type
    return sniff_mimetype(image.data)


def status_for_error(error: ImageSourceError) -> int:
    # A missing upstream image is reported as missing, not as a gateway failure
    if isinstance(error, UpstreamError) and error.status_code == 404:
        return 404
    return ERROR_STATUS.get(type(error), 500)


class ImageController(BaseController):
    def __init__(self, registry: SourceRegistry):
        self.registry = registry

    def get_image(self):
        source = self.registry.match(request)
        if source is None:
            return self.handle_error("Missing image source: provide a 'url' parameter or an image payload", 400)

        try:
            image = source.fetch_image(request)
        except ImageSourceError as e:
            return self.handle_error(str(e), status_for_error(e))

        mimetype = response_mimetype(image)
        logger.debug("Serving image", extra={"source": source.name, "size_bytes": len(image.data), "mimetype": mimetype})
        return Response(image.data, mimetype=mimetype, status=200)
