from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from typing import Optional
from slowapi import Limiter
from slowapi.util import get_remote_address

from auth_utils import verify_token
from config import RATE_LIMIT_ENABLED
from credential_store import CredentialStore
from database import SessionLocal
from errors import AuthRequiredError
from task_store import TaskStore

# Header clients send the token in. "Authorization: Bearer <token>" is accepted too.
TOKEN_HEADER = "x-auth-token"

# --- Database Dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)

def get_task_store(db: Session = Depends(get_db)) -> TaskStore:
    return TaskStore(db)

# --- Auth Gate ---
def extract_token(x_auth_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    if x_auth_token:
        return x_auth_token.strip()
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            return credentials.strip()
        # Present but not a bearer credential: let verification reject it
        return authorization.strip()
    return None

def get_current_user_id(
    request: Request,
    x_auth_token: Optional[str] = Header(None, alias=TOKEN_HEADER),
    authorization: Optional[str] = Header(None),
) -> str:
    """
    Resolve the caller's user id from the request headers.

    Raises:
        AuthRequiredError: no token supplied.
        InvalidTokenError: token supplied but not valid.
    """
    token = extract_token(x_auth_token, authorization)
    if not token:
        raise AuthRequiredError()
    user_id = verify_token(token)
    request.state.user_id = user_id
    return user_id

# --- Rate Limiter ---
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
