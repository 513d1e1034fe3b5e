from fastapi import APIRouter, Depends, status
from starlette.requests import Request

from config import LOGIN_RATE_LIMIT
from credential_store import CredentialStore
from dependencies import get_credential_store, limiter
from schemas import LoginRequest, SignupRequest, TokenResponse

router = APIRouter(tags=["auth"])

@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(user: SignupRequest, store: CredentialStore = Depends(get_credential_store)):
    """
    Register a new user and return a token for it.

    The password is stored as a bcrypt hash only.

    Raises:
        ValidationError (400): email or password missing.
        DuplicateEmailError (400): email already registered.
    """
    token = store.register(user.email, user.password, user.ip_address)
    return TokenResponse(token=token)

@router.post("/login", response_model=TokenResponse)
@limiter.limit(LOGIN_RATE_LIMIT)  # brute force protection, keyed by client IP
def login(request: Request, user: LoginRequest, store: CredentialStore = Depends(get_credential_store)):
    """
    Check email and password and return a fresh token.

    Unknown email and wrong password both answer 401 "Invalid credentials".
    """
    token = store.authenticate(user.email, user.password)
    return TokenResponse(token=token)
