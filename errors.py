"""
Error taxonomy of the service.

Stores and the auth gate raise these; main.py maps every ServiceError to a
JSON body ``{"error": message}`` with the class' status code.
"""
from typing import Optional


class ServiceError(Exception):
    status_code = 500
    kind = "InternalError"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    kind = "ValidationError"
    message = "Invalid input"


class DuplicateEmailError(ServiceError):
    status_code = 400
    kind = "DuplicateEmailError"
    message = "Email already exists"


class InvalidCredentialsError(ServiceError):
    status_code = 401
    kind = "InvalidCredentialsError"
    message = "Invalid credentials"


class AuthRequiredError(ServiceError):
    status_code = 401
    kind = "AuthRequired"
    message = "Authorization denied"


class InvalidTokenError(ServiceError):
    status_code = 401
    kind = "InvalidToken"
    message = "Token is not valid"


class NotFoundError(ServiceError):
    # Also used when the record exists but belongs to someone else
    status_code = 404
    kind = "NotFoundError"
    message = "Todo not found"


class InternalError(ServiceError):
    pass
