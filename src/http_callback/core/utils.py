"""
Utility functions for HTTP Callback.

Includes:
- URL composition from base path and request path
- Default/override merging for headers and params
"""

from typing import Iterable, Mapping, Optional, Tuple


def build_url(base_path: Optional[str], path: str) -> str:
    """
    Build the full URL from base path and request path.

    Absolute URLs are used as-is, the base path is ignored for them.

    Examples:
        >>> build_url("https://httpbin.org", "/get")
        'https://httpbin.org/get'
        >>> build_url("https://httpbin.org", "https://example.com/x")
        'https://example.com/x'
    """
    if path.startswith(("http://", "https://")):
        return path

    if not base_path:
        return path

    path = path.lstrip("/")
    if not path:
        return base_path.rstrip("/")
    return f"{base_path.rstrip('/')}/{path}"


def merge_headers(defaults: Mapping[str, str], overrides: Mapping[str, str]) -> dict:
    """
    Merge default headers with request headers.

    Header names compare case-insensitively; the request value wins and
    keeps the spelling the request used.
    """
    merged = {}
    lowered = {name.lower() for name in overrides}
    for name, value in defaults.items():
        if name.lower() not in lowered:
            merged[name] = value
    merged.update(overrides)
    return merged


def merge_params(
    defaults: Iterable[Tuple[str, str]],
    overrides: Iterable[Tuple[str, str]],
) -> Tuple[Tuple[str, str], ...]:
    """
    Merge default params with request params.

    A default is dropped when the request sets the same key. Order is
    defaults first, then request params.
    """
    overrides = tuple(overrides)
    keys = {key for key, _ in overrides}
    kept = tuple((key, value) for key, value in defaults if key not in keys)
    return kept + overrides
