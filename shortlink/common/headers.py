"""Header parsing utilities for shortlink."""

from typing import Dict, Optional, Mapping
from urllib.parse import unquote


# Edge geolocation headers, most specific provider first
GEO_HEADERS = {
    "city": ("x-vercel-ip-city",),
    "region": ("x-vercel-ip-country-region",),
    "country": ("x-vercel-ip-country", "cf-ipcountry"),
}


def _lower(headers: Mapping[str, str]) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    headers_lower = _lower(headers)

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build the request origin from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config

    Args:
        headers: Request headers
        fallback_base_url: Fallback base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request host

    Returns:
        Origin without trailing slash (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def extract_geo(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract requester location set by the edge network.

    Vercel percent-encodes city names, so values are unquoted.

    Args:
        headers: Request headers

    Returns:
        Dictionary with city, region, country (None when absent)
    """
    headers_lower = _lower(headers)
    geo: Dict[str, Optional[str]] = {}

    for field, names in GEO_HEADERS.items():
        value = next((headers_lower[n] for n in names if headers_lower.get(n)), None)
        geo[field] = unquote(value) if value else None

    return geo
