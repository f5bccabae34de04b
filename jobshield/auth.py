"""
Auth — API Key Validation

Keys come from JOBSHIELD_API_KEYS (comma-separated) and are held only
as SHA-256 hashes. The 12-character hash prefix of the caller's key is
the owner id used to scope analysis history.

With no keys configured, auth is disabled and every caller shares the
"anonymous" owner (dev mode).
"""

from __future__ import annotations

import hashlib
import os
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)

ANONYMOUS_OWNER = "anonymous"


def _hash(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()


_VALID_KEY_HASHES: set[str] = {
    _hash(k.strip()) for k in os.getenv("JOBSHIELD_API_KEYS", "").split(",") if k.strip()
}


def auth_enabled() -> bool:
    return len(_VALID_KEY_HASHES) > 0


def _verify_key(api_key: str) -> bool:
    """Verify an API key against stored hashes."""
    if not api_key:
        return False
    return _hash(api_key) in _VALID_KEY_HASHES


async def require_owner(
    api_key: Optional[str] = Security(API_KEY_HEADER),
) -> str:
    """
    FastAPI dependency — validates the API key and returns the owner id.

    401 when a key is required but missing, 403 when it is unknown.
    """
    if not auth_enabled():
        return ANONYMOUS_OWNER

    if not api_key:
        raise HTTPException(
            status_code=401,
            detail="Missing API key. Include X-API-Key header.",
        )

    if not _verify_key(api_key):
        raise HTTPException(status_code=403, detail="Invalid API key.")

    return _hash(api_key)[:12]


def generate_api_key() -> str:
    """Generate a new API key. Utility for key provisioning."""
    return f"js_{secrets.token_urlsafe(32)}"
