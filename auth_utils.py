from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_SECRET, TOKEN_EXPIRE_MINUTES
from errors import InvalidTokenError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Burn one bcrypt verification so unknown emails cost as much as wrong passwords."""
    pwd_context.dummy_verify()


def issue_token(user_id: str, expire_minutes: Optional[int] = TOKEN_EXPIRE_MINUTES) -> str:
    """
    Sign a token carrying the ``user_id`` claim.

    Tokens never expire unless ``expire_minutes`` is a positive number, in which
    case an ``exp`` claim is added and enforced by :func:`verify_token`.
    """
    payload = {"user_id": user_id}
    if expire_minutes and expire_minutes > 0:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: Optional[str]) -> str:
    """
    Return the user id of a valid token.

    Raises:
        InvalidTokenError: token missing, malformed, wrongly signed, expired or
            without a ``user_id`` claim.
    """
    if not token:
        raise InvalidTokenError()
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError() from exc
    user_id = payload.get("user_id")
    if not user_id or not isinstance(user_id, str):
        raise InvalidTokenError()
    return user_id
