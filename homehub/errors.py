"""Error taxonomy for the reservation engine.

Every failure is raised synchronously to the caller; nothing is partially
applied when one of these propagates out of an operation.
"""

from typing import Optional


class HomeHubError(Exception):
    """Base class for all domain errors"""

    code = "error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class Unauthenticated(HomeHubError):
    """No current actor for an action that requires one"""

    code = "unauthenticated"


class MissingField(HomeHubError):
    """A required free-text field is empty"""

    code = "missing_field"

    def __init__(self, field: str):
        super().__init__(f"Field '{field}' is required")
        self.field = field


class NotFound(HomeHubError):
    """A referenced document does not exist"""

    code = "not_found"

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class DuplicateEmail(HomeHubError):
    """Registration with an email that is already taken"""

    code = "duplicate_email"

    def __init__(self, email: str):
        super().__init__(f"Email '{email}' is already registered")
        self.email = email


class InvalidCredentials(HomeHubError):
    """No user matches the given email and password"""

    code = "invalid_credentials"


class InvalidState(HomeHubError):
    """A lifecycle precondition does not hold"""

    code = "invalid_state"


class AlreadyRated(InvalidState):
    """The reservation already carries a rating"""

    code = "already_rated"

    def __init__(self, reservation_id: str):
        super().__init__(f"Reservation '{reservation_id}' has already been rated")
        self.reservation_id = reservation_id


class InvalidCategory(HomeHubError):
    """A category filter names no known category"""

    code = "invalid_category"

    def __init__(self, value: str):
        super().__init__(f"Unknown service category '{value}'")
        self.value = value


class NoWorkersAvailable(HomeHubError):
    """The worker collection is empty, nobody can be assigned"""

    code = "no_workers_available"


class StoreError(HomeHubError):
    """The persistent store could not read or write a document"""

    code = "store_error"


class ConcurrentModification(StoreError):
    """Compare-and-swap kept failing because another writer got there first"""

    code = "concurrent_modification"

    def __init__(self, key: str, attempts: int):
        super().__init__(f"Gave up writing '{key}' after {attempts} conflicting attempts")
        self.key = key
        self.attempts = attempts
