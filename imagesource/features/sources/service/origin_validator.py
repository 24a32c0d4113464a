"""
Origin Validator
================

Decides whether a target URL may be fetched given the configured allow-list.
Comparison is done on the parsed (scheme, host, port) authority, never on
substrings, so lookalike hosts such as ``good.example.evil.com`` are rejected.
"""
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

from imagesource.features.sources.domain.source_config import SourceConfig, is_valid_host, normalize_host


class Authority(NamedTuple):
    scheme: str
    host: str
    port: Optional[int]


def parse_authority(url: str) -> Optional[Authority]:
    """
    Parse an absolute URL into its authority.

    Returns:
        The Authority, or None when the URL is not absolute or has an
        invalid host or port
    """
    if not url:
        return None
    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    host = normalize_host(parsed.hostname)
    if not is_valid_host(host):
        return None
    return Authority(parsed.scheme.lower(), host, port)


def is_allowed(config: SourceConfig, candidate_url: str) -> bool:
    """
    Check a candidate URL against the allow-list.

    An empty allow-list admits every URL. Otherwise the first matching entry
    admits it and unparseable URLs are never admitted.
    """
    if not config.restricts_origins:
        return True

    authority = parse_authority(candidate_url)
    if authority is None:
        return False

    for origin in config.allowed_origins:
        if origin.matches(authority.scheme, authority.host, authority.port):
            return True
    return False
