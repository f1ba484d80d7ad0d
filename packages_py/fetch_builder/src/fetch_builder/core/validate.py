"""
Request validation: RFC 3986 request-URI syntax and execute-time checks.
"""
import re
from typing import Tuple

from ..errors import InvalidURLError, NoMethodError
from ..types import RequestSpec

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_HOST_CHARS = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=:\[\]<>\"%\x80-\U0010ffff]*$")
_USERINFO_CHARS = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=:%@\x80-\U0010ffff]*$")
_PORT = re.compile(r"^[0-9]*$")


def _split_scheme(raw: str) -> Tuple[str, str]:
    """Split ``scheme:rest``. Returns ("", raw) when there is no scheme."""
    for i, c in enumerate(raw):
        if c.isascii() and c.isalpha():
            continue
        if c.isascii() and (c.isdigit() or c in "+-."):
            if i == 0:
                return "", raw
            continue
        if c == ":":
            if i == 0:
                raise InvalidURLError(raw, "missing protocol scheme")
            return raw[:i].lower(), raw[i + 1:]
        # Anything else means this cannot be a scheme
        return "", raw
    return "", raw


def _check_escapes(raw: str, part: str, where: str) -> None:
    match = _BAD_ESCAPE.search(part)
    if match:
        raise InvalidURLError(raw, f"invalid URL escape {part[match.start():match.start() + 3]!r} in {where}")


def _check_host(raw: str, host: str) -> None:
    if host.startswith("["):
        end = host.find("]")
        if end < 0:
            raise InvalidURLError(raw, "missing ']' in host")
        port_part = host[end + 1:]
        if port_part and not port_part.startswith(":"):
            raise InvalidURLError(raw, f"invalid port {port_part!r} after host")
        if port_part and not _PORT.match(port_part[1:]):
            raise InvalidURLError(raw, f"invalid port {port_part!r} after host")
    else:
        colon = host.rfind(":")
        if colon >= 0 and not _PORT.match(host[colon + 1:]):
            raise InvalidURLError(raw, f"invalid port {host[colon:]!r} after host")
    if not _HOST_CHARS.match(host):
        raise InvalidURLError(raw, f"invalid character in host name {host!r}")
    _check_escapes(raw, host, "host")


def _check_authority(raw: str, authority: str) -> None:
    at = authority.rfind("@")
    if at >= 0:
        userinfo = authority[:at]
        if not _USERINFO_CHARS.match(userinfo):
            raise InvalidURLError(raw, "invalid userinfo")
        _check_escapes(raw, userinfo, "userinfo")
    _check_host(raw, authority[at + 1:])


def validate_request_uri(url: str) -> None:
    """
    Validate ``url`` as an HTTP request URI.

    Accepted forms are an absolute URI with a scheme (``https://host/path``),
    an absolute path (``/api/v1``) or ``*``. Fragments are not split off;
    ``#`` is treated as part of the path.

    Raises:
        InvalidURLError: when the URI is not usable for a request.
    """
    if not url:
        raise InvalidURLError(url, "empty url")
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in url):
        raise InvalidURLError(url, "invalid control character in URL")
    if url == "*":
        return

    scheme, rest = _split_scheme(url)

    rest = rest.partition("?")[0]

    if not rest.startswith("/"):
        if scheme:
            # Opaque URI such as mailto:user@example.com
            return
        raise InvalidURLError(url, "invalid URI for request")

    if scheme and rest.startswith("//"):
        authority, slash, path = rest[2:].partition("/")
        _check_authority(url, authority)
        rest = slash + path

    _check_escapes(url, rest, "path")


def check_request(spec: RequestSpec) -> RequestSpec:
    """Execute-time check that the request is complete."""
    if not spec.method:
        raise NoMethodError()
    return spec
