"""Authentication - Optional shared API key for the HTTP surface.

There are no accounts: a deployment either has one configured key or is open.
Keys are compared by SHA256 digest in constant time.
"""

import hashlib
import hmac


BEARER_PREFIX = "Bearer "


def hash_api_key(api_key: str) -> str:
    """Hash an API key with SHA256.

    Args:
        api_key: The plaintext API key

    Returns:
        Hex digest of the key
    """
    return hashlib.sha256(api_key.encode()).hexdigest()


def bearer_token(auth_header: str | None) -> str | None:
    """Extract the token from an Authorization header.

    Args:
        auth_header: Raw header value

    Returns:
        The token, or None if the header is missing or not a bearer token
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def api_key_matches(provided: str | None, expected: str) -> bool:
    """Check a presented key against the configured one.

    Args:
        provided: Key from the request (may be None)
        expected: Configured key

    Returns:
        True if they match
    """
    if not provided:
        return False
    return hmac.compare_digest(hash_api_key(provided), hash_api_key(expected))
