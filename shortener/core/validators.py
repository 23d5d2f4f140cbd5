"""
Input Validators and Sanitizers

This module provides the shape checks applied to user input before it
reaches the stores:
- Identifier shape (exactly five base62 characters)
- Absolute URL syntax
- Fully qualified domain name shape
- Hostname extraction with the leading "www." stripped

Security Considerations:
- Identifiers are checked before any query touches them
- URLs with whitespace or unknown schemes are rejected
- Length limits prevent oversized rows
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

ID_LENGTH = 5

ID_PATTERN = re.compile(r"^[A-Za-z0-9]{%d}$" % ID_LENGTH)

ALLOWED_SCHEMES = {"http", "https", "ftp"}

MAX_URL_LENGTH = 2083

_LABEL_PATTERN = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_TLD_PATTERN = re.compile(r"^(?:[A-Za-z]{2,63}|xn--[A-Za-z0-9-]{1,59})$")

WWW_PREFIX = "www."


def is_valid_id(candidate: Optional[str]) -> bool:
    """Check that an identifier is exactly five alphanumeric characters."""
    return bool(candidate) and ID_PATTERN.fullmatch(candidate) is not None


def is_fqdn(domain: Optional[str]) -> bool:
    """
    Check whether a string is shaped like a fully qualified domain name.

    Rules:
    - at least two labels separated by dots, no trailing dot
    - each label 1-63 characters of [A-Za-z0-9-], no leading/trailing hyphen
    - the top-level label is alphabetic (or punycode) and at least 2 long
    - whole name at most 253 characters
    """
    if not domain or len(domain) > 253:
        return False

    labels = domain.split(".")
    if len(labels) < 2:
        return False

    if not all(_LABEL_PATTERN.fullmatch(label) for label in labels):
        return False

    return _TLD_PATTERN.fullmatch(labels[-1]) is not None


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def is_valid_url(url: Optional[str]) -> bool:
    """
    Validate that a string is a syntactically valid absolute URL.

    Accepts http, https and ftp URLs whose host is an FQDN, localhost or an
    IP literal. Does not resolve or contact the host.

    Args:
        url: The URL string to validate

    Returns:
        True if the URL is well-formed, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > MAX_URL_LENGTH:
        return False

    if any(char.isspace() for char in url):
        return False

    try:
        parts = urlsplit(url)
        # Accessing .port validates it is numeric and in range
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    host = parts.hostname
    if not host:
        return False

    return host == "localhost" or _is_ip_literal(host) or is_fqdn(host)


def decode_url(text: str) -> str:
    """
    Percent-decode submitted URL text.

    Raises:
        ValueError: If the escapes do not decode to valid UTF-8 or a
            percent sign is not followed by two hex digits
    """
    if re.search(r"%(?![0-9A-Fa-f]{2})", text):
        raise ValueError("Dangling percent escape")
    return unquote(text, errors="strict")


def strip_www(hostname: str) -> str:
    """Drop a literal leading "www." prefix, leaving everything else as is."""
    if hostname.startswith(WWW_PREFIX):
        return hostname[len(WWW_PREFIX):]
    return hostname


def extract_domain(url: str) -> str:
    """Hostname of a URL with a leading "www." removed."""
    return strip_www(urlsplit(url).hostname or "")
