# apps/billing/exceptions.py
"""
Error taxonomy for the billing ledger.

Every failure raised by the ledger, the lifecycle service and the access
gate is a BillingError. The API layer maps `status_code` and `code` onto
the HTTP response; callers inside the project catch the specific class.
"""


class BillingError(Exception):
    """Base class for billing failures."""
    status_code = 400
    code = 'billing_error'

    def __init__(self, message='', **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        return self.message


class InvalidArgument(BillingError):
    """Bad input: non-positive amount or quantity, malformed date, unknown choice."""
    status_code = 400
    code = 'invalid_argument'


class NotFound(BillingError):
    """Invoice, payment, service or client id does not exist."""
    status_code = 404
    code = 'not_found'


class InvalidState(BillingError):
    """The invoice cannot take this mutation in its current state (e.g. CANCELLED)."""
    status_code = 409
    code = 'invalid_state'


class Conflict(BillingError):
    """Concurrent modification detected; re-read and retry."""
    status_code = 409
    code = 'conflict'


class UpstreamUnavailable(BillingError):
    """The ledger could not be read (persistence failure)."""
    status_code = 503
    code = 'upstream_unavailable'
