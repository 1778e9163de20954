"""Token manager for handling JWT access tokens with enhanced security claims."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt

from app.configs import settings
from app.errors.auth import InvalidTokenError, TokenExpiredError
from app.schemas.auth import TokenData

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: int,
    username: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token with enhanced security claims.

    Args:
        user_id: User's id
        username: User's username
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "user_id": user_id,
        "username": username,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": ACCESS_TOKEN_TYPE,
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    """
    Decode and validate an access token.

    Args:
        token: JWT token string

    Returns:
        TokenData: Decoded token data

    Raises:
        TokenExpiredError: If the token is past its expiry.
        InvalidTokenError: If the signature, claims or token type are invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError from e
    except JWTError as e:
        raise InvalidTokenError from e

    user_id = payload.get("user_id")
    jti: str | None = payload.get("jti")
    token_type: str | None = payload.get("type")

    if not isinstance(user_id, int) or isinstance(user_id, bool) or not jti:
        raise InvalidTokenError
    if token_type != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError

    return TokenData(
        user_id=user_id,
        username=payload.get("username"),
        jti=jti,
        token_type=token_type,
    )
