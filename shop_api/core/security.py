from datetime import datetime, timedelta
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
import bcrypt
import secrets

from . import config


class TokenError(Exception):
    pass


class TokenExpiredError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token carrying `data` as claims.

    Args:
        data: Identity claims, e.g. {"userId", "username", "role"} or {"buyerId", "username"}
        expires_delta: Lifetime of the token, 24 hours by default

    Returns:
        str: Encoded JWT
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=config.ACCESS_TOKEN_EXPIRE_HOURS)
    now = datetime.utcnow()
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def create_buyer_token(data: dict) -> str:
    return create_access_token(data, timedelta(days=config.BUYER_TOKEN_EXPIRE_DAYS))


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry of a token.

    Raises:
        TokenExpiredError: The token was valid but its `exp` has passed
        TokenInvalidError: Bad signature, malformed token or wrong algorithm
    """
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpiredError(str(e))
    except JWTError as e:
        raise TokenInvalidError(str(e))


def generate_activation_code() -> str:
    # Uniform over [100000, 999999]
    return str(100000 + secrets.randbelow(900000))
