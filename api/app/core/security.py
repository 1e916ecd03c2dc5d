import hmac

from fastapi import Depends, Header, HTTPException, status

from app.core.auth import Principal, parse_basic_authorization
from app.core.config import Settings, get_settings

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="API"'}


async def get_basic_principal(
    settings: Settings = Depends(get_settings),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Principal:
    if not settings.basic_auth_username or not settings.basic_auth_password:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Basic auth is not configured",
        )

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing Authorization header",
            headers=BASIC_CHALLENGE,
        )

    credentials = parse_basic_authorization(authorization)
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid authentication method, expected Basic auth",
            headers=BASIC_CHALLENGE,
        )

    username_ok = hmac.compare_digest(
        credentials.username.encode("utf-8"), settings.basic_auth_username.encode("utf-8")
    )
    password_ok = hmac.compare_digest(
        credentials.password.encode("utf-8"), settings.basic_auth_password.encode("utf-8")
    )
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid credentials",
            headers=BASIC_CHALLENGE,
        )

    return Principal(subject=credentials.username)
