from __future__ import annotations


class BillingError(Exception):
    """Base class for errors raised by the billing services."""

    status_code = 400
    default_detail = "Billing operation failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(BillingError):
    """A referenced record does not exist."""

    status_code = 404
    default_detail = "Not found"


class ValidationFailure(BillingError):
    """A required field is missing or an invariant would be violated."""

    default_detail = "Invalid input"


class RateUnavailable(BillingError):
    """No active rate card or exchange rate for the requested currency/region."""

    default_detail = "Rate unavailable"


class InvalidTransition(BillingError):
    """A status change that the record's lifecycle does not allow."""

    status_code = 409
    default_detail = "Status change not allowed"


class AuthorizationDenied(BillingError):
    status_code = 403
    default_detail = "Forbidden"


class BackendFailure(BillingError):
    """The database or another backing service failed mid-request."""

    status_code = 503
    default_detail = "Backend failure"
