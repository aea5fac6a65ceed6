"""Identity failure taxonomy.

Every business-rule failure raised by the identity store derives from
``IdentityError``. None of them are retryable. Each carries a stable
``code`` for programmatic handling and a ``status_code`` the API layer
uses when rendering the error.
"""


class IdentityError(Exception):
    code = "identity_error"
    status_code = 400
    default_message = "Identity operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(IdentityError):
    code = "duplicate_email"
    status_code = 409
    default_message = "A user with this email already exists"


class InvalidCredentials(IdentityError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid email or password"

    def __init__(self):
        # Same message for unknown email and wrong password
        super().__init__(self.default_message)


class NotFound(IdentityError):
    code = "not_found"
    status_code = 404
    default_message = "Record not found"


class UserNotFound(IdentityError):
    code = "user_not_found"
    status_code = 404
    default_message = "Referenced user does not exist"


class ProfileAlreadyExists(IdentityError):
    code = "profile_already_exists"
    status_code = 409
    default_message = "User already has a staff profile"


class LastAdminProtected(IdentityError):
    code = "last_admin_protected"
    status_code = 409
    default_message = "Cannot delete the last admin user"
