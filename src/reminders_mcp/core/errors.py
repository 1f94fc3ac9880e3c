"""Shared error types for the reminders store layer."""

_SETTINGS_HINT = "System Settings > Privacy & Security > Reminders"


class RemindersError(Exception):
    """Base error for all store-layer failures."""


class AccessDeniedError(RemindersError):
    """Access to the reminders store was denied or never granted."""

    def __init__(self) -> None:
        super().__init__(
            "Access to Reminders was denied. "
            f"Please grant full access in {_SETTINGS_HINT}."
        )


class WriteOnlyAccessError(RemindersError):
    """Only write access was granted, but reads are required as well."""

    def __init__(self) -> None:
        super().__init__(
            "Only write access to Reminders was granted, but full access is required. "
            f"Please update permissions in {_SETTINGS_HINT}."
        )


class ListNotFoundError(RemindersError):
    """No reminder list matches the requested name."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        msg = (
            f'No reminder list found with the name "{name}". '
            "Check your available lists and verify the spelling."
        )
        if self.available:
            msg += f" Available lists: {', '.join(self.available)}."
        super().__init__(msg)


class ReminderNotFoundError(RemindersError):
    """No reminder matches the requested index or identifier."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(
            f'No reminder found matching "{reference}". '
            "The reminder may have been deleted or the identifier may be incorrect."
        )


class OperationFailedError(RemindersError):
    """A store operation failed for a reason given in ``detail``."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Reminders operation failed: {detail}")
