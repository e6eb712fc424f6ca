"""Account domain specific exceptions."""

from uniscape.modules.common.exceptions import ConflictError, NotFoundError


class AccountAlreadyExistsError(ConflictError):
    """Raised when username, email or student id is already registered."""


class AccountNotFoundError(NotFoundError):
    default_message = "User not found"
