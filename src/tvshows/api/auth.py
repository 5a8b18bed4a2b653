"""HTTP Basic authentication for the API routes."""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from tvshows.config import settings

security = HTTPBasic(auto_error=False, realm="TV Shows API")


def credentials_valid(username: str, password: str) -> bool:
    """Constant-time comparison against the configured API credentials."""
    username_ok = secrets.compare_digest(username.encode("utf-8"), settings.api_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), settings.api_password.encode("utf-8"))
    return username_ok and password_ok


async def require_api_user(
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> str:
    """
    Dependency that rejects requests without valid Basic credentials.

    Returns:
        The authenticated username
    """
    if credentials is None or not credentials_valid(credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": 'Basic realm="TV Shows API"'},
        )
    return credentials.username
