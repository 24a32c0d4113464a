"""
Body Image Source.

Serves POST/PUT requests that upload the image directly, either as the raw
request body or as the ``file`` field of a multipart form.
"""
from typing import Optional

from werkzeug.wrappers import Request

from imagesource.common.base.base_service import BaseService
from imagesource.features.sources.domain.errors import InvalidPayloadError, ResponseTooLargeError
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.domain.source_image import SourceImage, bare_mimetype
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

UPLOAD_METHODS = {'POST', 'PUT'}
FORM_FIELD = 'file'


class BodyImageSource(BaseService):
    name = 'payload'

    def __init__(self, config: Optional[SourceConfig] = None):
        self.config = config or SourceConfig()

    def matches(self, request: Request) -> bool:
        return request.method in UPLOAD_METHODS and bool(request.content_length)

    def get_image(self, request: Request) -> bytes:
        return self.fetch_image(request).data

    def fetch_image(self, request: Request) -> SourceImage:
        limit = self.config.max_response_bytes
        if limit is not None and (request.content_length or 0) > limit:
            logger.warning("Upload rejected", extra={"content_length": request.content_length, "max_size": limit})
            raise ResponseTooLargeError(limit)

        if request.mimetype == 'multipart/form-data':
            upload = request.files.get(FORM_FIELD)
            if upload is None:
                raise InvalidPayloadError(f"missing '{FORM_FIELD}' form field")
            data = upload.read()
            content_type = bare_mimetype(upload.mimetype)
        else:
            data = request.get_data(cache=False)
            content_type = bare_mimetype(request.mimetype)

        if not data:
            raise InvalidPayloadError("empty body")
        if limit is not None and len(data) > limit:
            raise ResponseTooLargeError(limit)

        logger.info("Image payload received", extra={"size_bytes": len(data), "mimetype": content_type})
        return SourceImage(data, content_type)
