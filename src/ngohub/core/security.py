import jwt
from datetime import datetime, timedelta, timezone
from werkzeug.security import check_password_hash, generate_password_hash

from ngohub.core.config import settings
from ngohub.core.errors import AuthError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: str, email: str) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        raise AuthError("Invalid or expired token", status_code=403) from e

    if not claims.get("sub"):
        raise AuthError("Invalid or expired token", status_code=403)
    return claims
