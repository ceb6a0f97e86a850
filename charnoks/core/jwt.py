from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from charnoks.core.config import settings

TOKEN_TYPE = "access"


def create_access_token(user_id: int, role: str, expires_delta: timedelta | None = None) -> str:
    """Sign a token whose subject is the worker id stamped on recorded sales."""
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None
    return payload


def token_user_id(token: str) -> int | None:
    """The user id a valid access token was issued to, or None."""
    payload = decode_access_token(token)
    if payload is None:
        return None

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
