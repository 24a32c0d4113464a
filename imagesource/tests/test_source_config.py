import dataclasses

import pytest

from imagesource.features.sources.domain.source_config import AllowedOrigin, SourceConfig


def test_parse_origin_with_port():
    origin = AllowedOrigin.parse("https://CDN.Example.com:8443")

    assert origin == AllowedOrigin(scheme="https", host="cdn.example.com", port=8443)
    assert str(origin) == "https://cdn.example.com:8443"


def test_parse_origin_without_port_accepts_any_port():
    origin = AllowedOrigin.parse("http://good.example/")

    assert origin.port is None
    assert str(origin) == "http://good.example"


def test_parse_origin_strips_trailing_dot():
    assert AllowedOrigin.parse("http://good.example.").host == "good.example"


def test_parse_strips_only_one_trailing_dot():
    with pytest.raises(ValueError):
        AllowedOrigin.parse("http://bar.com..")


@pytest.mark.parametrize("value", [
    "",
    "   ",
    "good.example",
    "/images",
    "http://",
    "http://host:notaport",
    "http://a..b.com",
    "http://" + "a" * 64 + ".com",
])
def test_parse_rejects_malformed_origins(value):
    with pytest.raises(ValueError):
        AllowedOrigin.parse(value)


def test_config_defaults_are_unrestricted():
    config = SourceConfig()

    assert config.allowed_origins == ()
    assert config.restricts_origins is False
    assert config.max_response_bytes is None
    assert config.timeout is None


def test_config_stores_origins_as_tuple():
    origins = [AllowedOrigin.parse("http://a.example")]
    config = SourceConfig(allowed_origins=origins)
    origins.append(AllowedOrigin.parse("http://b.example"))

    assert config.allowed_origins == (AllowedOrigin("http", "a.example"),)


def test_config_is_immutable():
    config = SourceConfig.from_origins(["http://a.example"])

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.timeout = 3


def test_from_origins_skips_blank_entries_and_keeps_order():
    config = SourceConfig.from_origins(["https://b.example", " ", "", "http://a.example:8080"], timeout=2.5)

    assert [str(o) for o in config.allowed_origins] == ["https://b.example", "http://a.example:8080"]
    assert config.timeout == 2.5


@pytest.mark.parametrize("kwargs", [{"max_response_bytes": 0}, {"max_response_bytes": -1}, {"timeout": 0}, {"timeout": -0.5}])
def test_config_rejects_non_positive_limits(kwargs):
    with pytest.raises(ValueError):
        SourceConfig(**kwargs)
