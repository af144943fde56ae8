"""
Connection endpoint validation.

Host and port checks shared by the session and the HTTP layer.
"""
import ipaddress
import re
from dataclasses import dataclass
from typing import Any

from .codec import encode
from .exceptions import InvalidEndpoint, InvalidHex

_LABEL_PATTERN = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
MAX_HOSTNAME_LENGTH = 253

MIN_PORT = 1
MAX_PORT = 65535


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _is_hostname(host: str) -> bool:
    """RFC 1123 host name; single labels such as "localhost" are allowed."""
    name = host[:-1] if host.endswith(".") else host
    if not name or len(name) > MAX_HOSTNAME_LENGTH:
        return False
    labels = name.split(".")
    # All-digit last label means a malformed IPv4 literal
    if labels[-1].isdigit():
        return False
    return all(_LABEL_PATTERN.match(label) for label in labels)


def validate_host(host: str) -> bool:
    """Check for an IPv4 or IPv6 address or a host name."""
    if not host or not isinstance(host, str):
        return False
    return _is_ip_address(host) or _is_hostname(host)


def validate_port(port: Any) -> bool:
    """Check for an integer (or numeric string) in 1..65535."""
    if isinstance(port, bool):
        return False
    try:
        value = int(port)
    except (TypeError, ValueError):
        return False
    if isinstance(port, float) and value != port:
        return False
    return MIN_PORT <= value <= MAX_PORT


def is_valid_hex(text: str) -> bool:
    """Non-raising check that text would encode."""
    try:
        encode(text)
    except InvalidHex:
        return False
    return True


@dataclass(frozen=True)
class Endpoint:
    """Remote host and port of a connection."""
    host: str
    port: int

    @classmethod
    def parse(cls, host: Any, port: Any) -> "Endpoint":
        """
        Build a validated endpoint.

        Raises:
            InvalidEndpoint: If host or port is not acceptable.
        """
        host = host.strip() if isinstance(host, str) else host
        if not validate_host(host):
            raise InvalidEndpoint(f"Invalid host address: {host!r}", host, port)
        if not validate_port(port):
            raise InvalidEndpoint(
                f"Port must be between {MIN_PORT} and {MAX_PORT}, got {port!r}",
                host,
                port,
            )
        return cls(host=host, port=int(port))

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
