"""Domain errors raised by the booking engine services.

Routes translate these into HTTP responses; the message of each error is
safe to show to the user as-is.
"""


class ProvisioningError(Exception):
    """Default operating hours or pricing could not be created for a venue."""


class BookingError(Exception):
    """Base class for every failed booking attempt."""


class AuthRequiredError(BookingError):
    def __init__(self, message: str = "Authentication required to book a slot."):
        super().__init__(message)


class BookingValidationError(BookingError, ValueError):
    """User-entered booking details were rejected before any write."""


class SlotUnavailableError(BookingError):
    def __init__(self, message: str = "This slot is no longer available. Please pick another slot."):
        super().__init__(message)


class BookingWriteError(BookingError):
    """The store rejected the booking write."""
