"""Account domain services and models."""

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import Account, AccountCreateInput, AccountProfile
from .service import AccountService

__all__ = [
    "Account",
    "AccountCreateInput",
    "AccountProfile",
    "AccountService",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
]
