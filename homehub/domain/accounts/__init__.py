"""Accounts domain - Registration, login and current actor lookup"""

from .repository import AccountRepository
from .service import AccountService

__all__ = ["AccountRepository", "AccountService"]
