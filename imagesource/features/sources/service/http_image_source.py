"""
HTTP Image Source - Remote Fetcher
==================================

Serves requests carrying a ``url`` query parameter:
1. Extracts and parses the target URL
2. Checks its origin against the configured allow-list
3. Performs a single blocking GET with transport defaults (no custom headers)
4. Returns the full body, or raises a typed ImageSourceError

No retries and no partial results: either the complete body is returned or
an error is raised.
"""
from typing import Optional

import requests
from urllib3.exceptions import LocationValueError
from werkzeug.wrappers import Request

from imagesource.common.base.base_service import BaseService
from imagesource.features.sources.domain.errors import (
    InvalidURLError,
    OriginNotAllowedError,
    ResponseTooLargeError,
    TransportError,
    UpstreamError,
)
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.domain.source_image import SourceImage, bare_mimetype
from imagesource.features.sources.service.origin_validator import is_allowed, parse_authority
from imagesource.services.system.logger_service import get_logger, log_fetch_operation

logger = get_logger(__name__)

URL_PARAM = 'url'
ALLOWED_SCHEMES = {'http', 'https'}
CHUNK_SIZE = 64 * 1024


class HttpImageSource(BaseService):
    name = 'http'

    def __init__(self, config: Optional[SourceConfig] = None):
        self.config = config or SourceConfig()

    def matches(self, request: Request) -> bool:
        return bool(self._target_url(request))

    def get_image(self, request: Request, timeout: Optional[float] = None) -> bytes:
        """Fetch the image referenced by the request's ``url`` parameter and return its bytes."""
        return self.fetch_image(request, timeout=timeout).data

    def fetch_image(self, request: Request, timeout: Optional[float] = None) -> SourceImage:
        """
        Fetch the image referenced by the request's ``url`` parameter.

        Args:
            request: Inbound request
            timeout: Per-call deadline in seconds; overrides the configured timeout

        Returns:
            The complete response body with the upstream Content-Type

        Raises:
            InvalidURLError: Missing, relative, malformed or non-http(s) URL
            OriginNotAllowedError: Origin rejected by the allow-list
            TransportError: DNS, connection, timeout or read failure
            UpstreamError: Non-2xx response status
            ResponseTooLargeError: Body exceeds ``max_response_bytes``
        """
        url = self._target_url(request)
        if not url:
            raise InvalidURLError(url, "missing")

        authority = parse_authority(url)
        if authority is None:
            raise InvalidURLError(url, "not an absolute URL with a valid host")
        if authority.scheme not in ALLOWED_SCHEMES:
            raise InvalidURLError(url, f"unsupported scheme '{authority.scheme}'")

        if not is_allowed(self.config, url):
            log_fetch_operation(logger, 'REJECTED', url, host=authority.host)
            raise OriginNotAllowedError(authority.host)

        effective_timeout = timeout if timeout is not None else self.config.timeout
        return self._fetch(url, effective_timeout)

    def _target_url(self, request: Request) -> str:
        return (request.args.get(URL_PARAM) or '').strip()

    def _fetch(self, url: str, timeout: Optional[float]) -> SourceImage:
        log_fetch_operation(logger, 'START', url, timeout=timeout)
        try:
            # stream=True so the size cap applies while reading; the context
            # manager releases the connection on every exit path
            with requests.get(url, stream=True, timeout=timeout) as response:
                if not 200 <= response.status_code < 300:
                    log_fetch_operation(logger, 'FAILED', url, status_code=response.status_code)
                    raise UpstreamError(url, response.status_code)
                body = self._read_body(url, response)
                content_type = bare_mimetype(response.headers.get('content-type'))
        except (requests.exceptions.InvalidURL, LocationValueError) as exc:
            # urllib3 re-raises its own parse errors unwrapped for hosts it cannot encode
            log_fetch_operation(logger, 'REJECTED', url, error=str(exc), error_type=type(exc).__name__)
            raise InvalidURLError(url, str(exc)) from exc
        except requests.RequestException as exc:
            log_fetch_operation(logger, 'FAILED', url, error=str(exc), error_type=type(exc).__name__)
            raise TransportError(url, exc) from exc

        log_fetch_operation(logger, 'SUCCESS', url, size_bytes=len(body), content_type=content_type)
        return SourceImage(body, content_type)

    def _read_body(self, url: str, response: requests.Response) -> bytes:
        limit = self.config.max_response_bytes

        if limit is not None:
            declared = response.headers.get('content-length', '')
            if declared.isdigit() and int(declared) > limit:
                log_fetch_operation(logger, 'FAILED', url, declared_size=int(declared), max_size=limit)
                raise ResponseTooLargeError(limit, url)

        body = bytearray()
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            body.extend(chunk)
            if limit is not None and len(body) > limit:
                log_fetch_operation(logger, 'FAILED', url, downloaded_size=len(body), max_size=limit)
                raise ResponseTooLargeError(limit, url)

        return bytes(body)
