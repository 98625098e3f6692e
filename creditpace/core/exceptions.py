"""Exceptions raised by CreditPace collaborators.

The projection engine itself never raises for structurally valid input.
"""


class CreditPaceError(Exception):
    """Base exception for CreditPace."""


class StateLoadError(CreditPaceError):
    """Stored state is unreadable, corrupt, or from a newer schema."""


class StateSaveError(CreditPaceError):
    """State could not be written to storage."""


class ImportFormatError(CreditPaceError):
    """Backup document is not valid JSON or lacks profile/expenses."""


class ProfileNotConfiguredError(CreditPaceError):
    """An operation needs a profile but none has been set up."""


class ExpenseNotFoundError(CreditPaceError):
    """No expense matches the given identifier."""


class EntryValidationError(CreditPaceError):
    """User-entered values failed field-level validation.

    Attributes:
        errors: Mapping of field name to message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        detail = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(detail)
