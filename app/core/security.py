"""
HTTP Basic auth guarding the bundle admin pages.

The merchant signs in with the single username/password pair from settings.
Outside production a missing password falls back to DEV_FALLBACK_PASSWORD so
the pages work against a development store without extra setup.
"""

import logging
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEV_FALLBACK_PASSWORD = "changeme"

basic_auth = HTTPBasic(realm="Smart Bundle Creator")


def _matches(supplied: str, expected: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf8"), expected.encode("utf8"))


def get_current_username(
    credentials: HTTPBasicCredentials = Depends(basic_auth),
    settings: Settings = Depends(get_settings),
) -> str:
    """Return the signed-in username or reject the request with 401"""
    expected_password = settings.BASIC_AUTH_PASSWORD
    if not expected_password:
        if settings.is_production:
            logger.error("BASIC_AUTH_PASSWORD is not set in production; refusing all admin requests")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Basic auth password not configured",
            )
        expected_password = DEV_FALLBACK_PASSWORD

    # Evaluate both so a wrong username takes as long as a wrong password
    username_ok = _matches(credentials.username, settings.BASIC_AUTH_USERNAME)
    password_ok = _matches(credentials.password, expected_password)

    if not (username_ok and password_ok):
        logger.info(f"Rejected admin sign-in for user '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def require_auth():
    """Usage: app.include_router(router, dependencies=[require_auth()])"""
    return Depends(get_current_username)
