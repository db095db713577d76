"""
Service classification from request URLs.
"""

from urllib.parse import urlparse

from apilogs.constants import SERVICE_PATTERNS, UNKNOWN_SERVICE


def classify_service(url: str) -> str:
    """
    Map a URL to a coarse service label by hostname substring.

    Patterns are checked in order and the first match wins, so the
    bedrock and vertex labels only apply to hosts that match neither
    the anthropic nor the openai patterns.
    """
    try:
        hostname = urlparse(str(url)).hostname or ""
    except ValueError:
        return UNKNOWN_SERVICE

    for needles, service in SERVICE_PATTERNS:
        if any(needle in hostname for needle in needles):
            return service

    return UNKNOWN_SERVICE
