from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from cardshop.db import settings


def create_access_token(data: Dict[str, Any], expires_minutes: int | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    to_encode.update({"exp": expire})
    token = jwt.encode(to_encode, settings.auth_secret, algorithm=settings.auth_algorithm)
    return token


def create_admin_token(username: str, expires_minutes: int | None = None) -> str:
    return create_access_token({"sub": username}, expires_minutes=expires_minutes)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Try every configured secret so rotated tokens keep working."""
    last_error: Exception | None = None
    for secret in settings.AUTH_SECRETS_LIST:
        try:
            return jwt.decode(token, secret, algorithms=[settings.auth_algorithm])
        except JWTError as exc:
            last_error = exc
            continue
    raise JWTError("Token signature did not match any configured secret") from last_error
