import ipaddress
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple
from urllib.parse import urlsplit

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}

MAX_HOST_LENGTH = 253
MAX_LABEL_LENGTH = 63
_LABEL_RE = re.compile(r'^[a-z0-9_-]+$')


def normalize_host(host: str) -> str:
    """Lowercase a hostname and drop a single trailing root dot (``example.com.``)."""
    host = host.lower()
    return host[:-1] if host.endswith('.') else host


def is_valid_host(host: str) -> bool:
    """
    Check a normalized host: an IP literal, or a DNS name whose labels are
    1-63 characters (IDNA-encoded for non-ASCII labels).
    """
    if not host or len(host) > MAX_HOST_LENGTH:
        return False
    if ':' in host:
        # urlsplit strips the brackets of IPv6 literals
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True

    for label in host.split('.'):
        if not label:
            return False
        if not label.isascii():
            try:
                label = label.encode('idna').decode('ascii')
            except UnicodeError:
                return False
        if len(label) > MAX_LABEL_LENGTH or not _LABEL_RE.match(label):
            return False
    return True


@dataclass(frozen=True)
class AllowedOrigin:
    """
    A permitted origin on the allow-list.

    Attributes:
        scheme (str): Lower-cased URL scheme (``http`` / ``https``)
        host (str): Normalized hostname
        port (Optional[int]): Required port, or None to accept any port
    """
    scheme: str
    host: str
    port: Optional[int] = None

    @classmethod
    def parse(cls, value: str) -> 'AllowedOrigin':
        """
        Parse an origin such as ``https://cdn.example.com:8443``.

        Raises:
            ValueError: If the value has no scheme, an unusable host, or an invalid port
        """
        text = (value or '').strip()
        parsed = urlsplit(text)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"Invalid allowed origin (expected scheme://host[:port]): {value!r}")
        # Accessing .port raises ValueError for out-of-range or non-numeric ports
        port = parsed.port
        host = normalize_host(parsed.hostname)
        if not is_valid_host(host):
            raise ValueError(f"Invalid allowed origin host: {value!r}")
        return cls(scheme=parsed.scheme.lower(), host=host, port=port)

    def matches(self, scheme: str, host: str, port: Optional[int]) -> bool:
        """Compare against a candidate authority (already normalized)."""
        if scheme != self.scheme or host != self.host:
            return False
        if self.port is None:
            return True
        effective_port = port if port is not None else DEFAULT_PORTS.get(scheme)
        return effective_port == self.port

    def __str__(self) -> str:
        if self.port is None:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class SourceConfig:
    """
    Immutable configuration shared by every image source.

    Attributes:
        allowed_origins (Tuple[AllowedOrigin, ...]): Ordered allow-list; empty allows all origins
        max_response_bytes (Optional[int]): Maximum image size, None for no limit
        timeout (Optional[float]): Outbound request timeout in seconds, None for no deadline
    """
    allowed_origins: Tuple[AllowedOrigin, ...] = field(default_factory=tuple)
    max_response_bytes: Optional[int] = None
    timeout: Optional[float] = None

    def __post_init__(self):
        # Accept any iterable (list from env parsing) but store an immutable tuple
        object.__setattr__(self, 'allowed_origins', tuple(self.allowed_origins))
        if self.max_response_bytes is not None and self.max_response_bytes <= 0:
            raise ValueError("max_response_bytes must be a positive number of bytes")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")

    @classmethod
    def from_origins(cls, origins: Iterable[str], **kwargs) -> 'SourceConfig':
        """Build a config from origin strings, skipping blank entries."""
        parsed = [AllowedOrigin.parse(origin) for origin in origins if origin and origin.strip()]
        return cls(allowed_origins=tuple(parsed), **kwargs)

    @property
    def restricts_origins(self) -> bool:
        return len(self.allowed_origins) > 0
