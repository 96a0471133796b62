# medconnect/errors.py
"""Domain errors raised by the services and mapped to HTTP responses in main.py."""


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request data"


class DuplicateEmail(AppError):
    status_code = 400
    default_message = "User already exists"


class DuplicateDoctorProfile(AppError):
    status_code = 400
    default_message = "Doctor profile already exists for this user"


class AuthError(AppError):
    status_code = 401
    default_message = "Not authorized, token failed"


class InvalidCredentials(AuthError):
    default_message = "Invalid email or password"


class Unauthorized(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DoctorNotFound(NotFound):
    default_message = "Doctor not found"


class DoctorProfileNotFound(NotFound):
    default_message = "Doctor profile not found"


class InvalidState(AppError):
    status_code = 409
    default_message = "Operation not allowed in the current state"


class ServerError(AppError):
    pass


class ConsistencyError(ServerError):
    default_message = "Record could not be confirmed after save"
