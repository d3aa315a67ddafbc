"""Jerarquía de errores del Bank Service. Cada error conoce su código HTTP y su mensaje público."""

from typing import Optional


class BankServiceError(Exception):
    type: str = "INTERNAL"
    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self):
        return {"message": self.message}


# --- VALIDATION ---
class ValidationFailed(BankServiceError):
    type = "VALIDATION"
    status_code = 400
    message = "Invalid request"


# --- AUTH_FAILURE ---
class InvalidCredentials(BankServiceError):
    type = "AUTH_FAILURE"
    status_code = 401
    message = "Invalid email or password"


class MissingToken(BankServiceError):
    type = "AUTH_FAILURE"
    status_code = 401
    message = "Access token missing"


class InvalidToken(BankServiceError):
    type = "AUTH_FAILURE"
    status_code = 403
    message = "Invalid access token"


# --- CONFLICT ---
class EmailAlreadyRegistered(BankServiceError):
    type = "CONFLICT"
    status_code = 409
    message = "Email already registered"


# --- NOT_FOUND ---
class AccountNotFound(BankServiceError):
    type = "NOT_FOUND"
    status_code = 404
    message = "Account not found"


# --- INTERNAL ---
class StorageError(BankServiceError):
    pass


class HashingError(BankServiceError):
    pass
