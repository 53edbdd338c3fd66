"""URL assembly: path and query percent-encoding joined onto a base URL."""

from typing import Any, Mapping, Optional
from urllib.parse import quote

from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema
from requests.models import PreparedRequest

from .errors import invalid_url_error

# Sub-delimiters plus ":", "@" and "/"; letters, digits and "-._~" are always kept.
PATH_SAFE_CHARS = "!$&'()*+,;=:@/"
QUERY_SAFE_CHARS = PATH_SAFE_CHARS + "?"


def safe_path(path: str) -> Optional[str]:
    """Percent-encode ``path`` for use as a URL path, or ``None`` if it cannot be."""
    try:
        return quote(path, safe=PATH_SAFE_CHARS)
    except UnicodeEncodeError:
        return None


def render_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def pathify_queries(path: str, queries: Mapping[str, Any]) -> str:
    """Append ``queries`` to an already encoded ``path``.

    Spaces in values become ``+`` before the whole query string is
    percent-encoded, giving form-style query encoding.
    """
    if not queries:
        return path

    pairs = []
    for key, value in queries.items():
        rendered = render_query_value(value).replace(" ", "+")
        pairs.append(f"{key}={rendered}")
    query_path = "?" + "&".join(pairs)

    try:
        encoded = quote(query_path, safe=QUERY_SAFE_CHARS)
    except UnicodeEncodeError as e:
        raise invalid_url_error() from e
    return path + encoded


def build_url(base: str, path: str, queries: Optional[Mapping[str, Any]] = None) -> str:
    """Join ``base`` with the encoded ``path`` and optional ``queries``.

    Raises:
        CourierError: status 404, when the path or query cannot be encoded
            or the result is not a valid URL.
    """
    encoded_path = safe_path(path)
    if encoded_path is None:
        raise invalid_url_error()
    if queries is not None:
        encoded_path = pathify_queries(encoded_path, queries)

    url = base + encoded_path
    try:
        PreparedRequest().prepare_url(url, None)
    except (InvalidURL, InvalidSchema, MissingSchema) as e:
        raise invalid_url_error() from e
    return url
