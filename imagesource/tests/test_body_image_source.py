import io

import pytest

from imagesource.features.sources.domain.errors import InvalidPayloadError, ResponseTooLargeError
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.service.body_image_source import BodyImageSource
from imagesource.features.sources.service.http_image_source import HttpImageSource
from imagesource.features.sources.service.image_source import ImageSource, SourceRegistry
from imagesource.tests.image_fixtures import TINY_PNG


def test_matches_post_and_put_with_payload(make_request):
    source = BodyImageSource()

    assert source.matches(make_request(method='POST', data=TINY_PNG, content_type='image/png')) is True
    assert source.matches(make_request(method='PUT', data=TINY_PNG, content_type='image/png')) is True


def test_does_not_match_get_or_empty_payload(make_request):
    source = BodyImageSource()

    assert source.matches(make_request()) is False
    assert source.matches(make_request(method='POST')) is False


def test_raw_body_is_returned(make_request):
    request = make_request(method='POST', data=TINY_PNG, content_type='image/png')

    assert BodyImageSource().get_image(request) == TINY_PNG


def test_multipart_file_field_is_returned(make_request):
    request = make_request(method='POST', data={'file': (io.BytesIO(TINY_PNG), 'tiny.png')})

    assert BodyImageSource().get_image(request) == TINY_PNG


def test_multipart_without_file_field_is_rejected(make_request):
    request = make_request(method='POST', data={'other': (io.BytesIO(TINY_PNG), 'tiny.png')})

    with pytest.raises(InvalidPayloadError):
        BodyImageSource().get_image(request)


def test_empty_body_is_rejected(make_request):
    with pytest.raises(InvalidPayloadError):
        BodyImageSource().get_image(make_request(method='POST'))


def test_payload_over_limit_is_rejected(make_request):
    source = BodyImageSource(SourceConfig(max_response_bytes=8))
    request = make_request(method='POST', data=TINY_PNG, content_type='image/png')

    with pytest.raises(ResponseTooLargeError) as exc:
        source.get_image(request)

    assert exc.value.limit == 8


def test_sources_satisfy_the_protocol():
    assert isinstance(HttpImageSource(), ImageSource)
    assert isinstance(BodyImageSource(), ImageSource)


def test_registry_prefers_first_matching_source(make_request):
    http_source = HttpImageSource()
    body_source = BodyImageSource()
    registry = SourceRegistry([http_source, body_source])

    assert registry.names == ('http', 'payload')
    assert registry.match(make_request(url="http://bar.com/a.png")) is http_source
    assert registry.match(make_request(url="http://bar.com/a.png", method='POST', data=TINY_PNG)) is http_source
    assert registry.match(make_request(method='POST', data=TINY_PNG)) is body_source
    assert registry.match(make_request()) is None
