"""Courier error kinds.

Batch-level errors (``CourierConfigurationError``) reject a whole push
request before any order is touched. Every other error is scoped to a
single order and is turned into that order's result entry.
"""


class CourierError(Exception):
    """Base class for courier integration errors."""

    code = "COURIER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CourierConfigurationError(CourierError):
    """Credentials missing, production guard tripped, or malformed batch."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class BookingValidationError(CourierError):
    """Consignee data the courier requires is missing; nothing was sent."""

    code = "VALIDATION_ERROR"


class AmbiguousCityError(CourierError):
    """The destination city could not be matched confidently."""

    code = "UNSERVICEABLE_CITY"

    def __init__(self, message: str, suggestions: list | None = None):
        super().__init__(message)
        self.suggestions = suggestions or []


class DuplicateBookingError(CourierError):
    """The order is already booked and no re-book override was given."""

    code = "ALREADY_BOOKED"

    def __init__(
        self,
        message: str,
        consignment_no: str | None = None,
        tracking_number: str | None = None,
        label_url: str | None = None,
    ):
        super().__init__(message)
        self.consignment_no = consignment_no
        self.tracking_number = tracking_number
        self.label_url = label_url


class ProviderRejection(CourierError):
    """The courier answered but did not accept the request."""

    code = "PROVIDER_REJECTED"

    def __init__(self, message: str, response: dict | None = None, http_status: int | None = None):
        super().__init__(message)
        self.response = response or {}
        self.http_status = http_status


class CourierTransportError(CourierError):
    """The request never produced a usable response (network, timeout, non-JSON)."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        self.http_status = http_status


class TrackingExhaustedError(CourierError):
    """No endpoint/credential/method combination returned tracking data."""

    code = "TRACKING_FAILED"

    def __init__(self, message: str, attempts: list[dict], response: dict | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.response = response
