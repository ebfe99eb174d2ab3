import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_ACCESS_TOKEN_EXPIRE_MINUTES
from models.auth_model import AuthenticatedIdentity
from utils.exceptions import UnauthenticatedError


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signed token whose ``sub`` claim is the user id"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    to_encode = {"sub": user_id, "iat": now, "exp": now + expires_delta}
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: Optional[str]) -> AuthenticatedIdentity:
    """
    Verify a token and turn it into the caller's identity.
    The user id is read from ``sub`` and nowhere else.
    """
    if not token or token in ("null", "undefined"):
        raise UnauthenticatedError("No authorization token provided")

    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.PyJWTError:
        raise UnauthenticatedError("Invalid token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise UnauthenticatedError("Invalid token: no user ID")
    return AuthenticatedIdentity(user_id=user_id)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()
