import hmac
import os
from typing import Annotated, Optional

from fastapi import Header, HTTPException

ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")
MATHLY_API_KEY = os.getenv("MATHLY_API_KEY", "")


def _matches(supplied: Optional[str], expected: str) -> bool:
    return bool(expected) and supplied is not None and hmac.compare_digest(supplied, expected)


def require_admin(
    x_admin_token: Annotated[Optional[str], Header(alias="x-admin-token")] = None,
) -> None:
    """Admin endpoints (session purge and count) need X-Admin-Token."""
    if not ADMIN_TOKEN:
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN not configured on server.")
    if not _matches(x_admin_token, ADMIN_TOKEN):
        raise HTTPException(status_code=401, detail="Unauthorized.")


def require_client(
    x_api_key: Annotated[Optional[str], Header(alias="x-api-key")] = None,
    x_admin_token: Annotated[Optional[str], Header(alias="x-admin-token")] = None,
) -> None:
    """Progress endpoints take the client key; an admin token works too."""
    if _matches(x_admin_token, ADMIN_TOKEN):
        return
    if not MATHLY_API_KEY:
        raise HTTPException(status_code=500, detail="MATHLY_API_KEY not configured on server.")
    if not _matches(x_api_key, MATHLY_API_KEY):
        raise HTTPException(status_code=401, detail="Unauthorized.")
