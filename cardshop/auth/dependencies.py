from fastapi import Cookie, Depends, Header, HTTPException, Request, status
from jose import JWTError

from cardshop.db import get_admin_handles
from cardshop.security import decode_access_token


def _extract_token(authorization: str | None, token_cookie: str | None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    if token_cookie:
        return token_cookie
    return None


def get_current_handle_optional(
    authorization: str | None = Header(default=None, alias="Authorization"),
    token_cookie: str | None = Cookie(default=None, alias="admin_token"),
) -> str | None:
    token = _extract_token(authorization, token_cookie)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    handle = payload.get("sub")
    if not isinstance(handle, str) or not handle.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    return handle.strip()


def is_admin_handle(handle: str | None, admin_handles: frozenset[str]) -> bool:
    if not handle:
        return False
    return handle.strip().lower() in admin_handles


def require_admin(
    request: Request,
    handle: str | None = Depends(get_current_handle_optional),
    admin_handles: frozenset[str] = Depends(get_admin_handles),
) -> str:
    """Allow the request only for handles on the admin allow-list.

    Runs before the route body, so a rejected caller never reaches storage.
    """
    if not is_admin_handle(handle, admin_handles):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    request.state.admin_handle = handle
    return handle
