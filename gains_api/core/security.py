"""Shared-secret comparison helpers."""

import hmac


def secrets_match(provided: str | None, expected: str) -> bool:
    """Compare a caller-supplied secret with the configured one in constant time."""
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def bearer_matches(authorization: str | None, secret: str) -> bool:
    """Check an Authorization header of the form "Bearer <secret>"."""
    return secrets_match(authorization, f"Bearer {secret}")
