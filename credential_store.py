import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth_utils import dummy_verify, hash_password, issue_token, verify_password
from errors import DuplicateEmailError, InternalError, InvalidCredentialsError, ValidationError
from models import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """Signup and login on top of the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, email: Optional[str], password: Optional[str], ip_address: Optional[str] = None) -> str:
        """
        Create a user and return a token bound to the new id.

        Raises:
            ValidationError: email or password missing.
            DuplicateEmailError: email already registered.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            if self.db.query(User).filter(User.email == email).first():
                raise DuplicateEmailError()
            user = User(email=email, hashed_password=hash_password(password), ip_address=ip_address)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent signup for the same email
            self.db.rollback()
            raise DuplicateEmailError() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to persist user")
            raise InternalError() from exc

        logger.info("Registered user %s", user.id)
        return issue_token(user.id)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and return a fresh token.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to load user")
            raise InternalError() from exc

        if user is None:
            dummy_verify()
            logger.info("Login failed")
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            logger.info("Login failed")
            raise InvalidCredentialsError()
        return issue_token(user.id)
