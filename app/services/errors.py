"""Domain errors raised by the checkout services.

Each error carries the HTTP status the API answers with; ``errors_bp``
turns them into the JSON error envelope.
"""


class CheckoutError(Exception):
    status = 400

    def __init__(self, message, *, status=None, details=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.details = details


class ValidationError(CheckoutError):
    status = 400


class NotFound(CheckoutError):
    status = 404


class Forbidden(CheckoutError):
    status = 403


class InsufficientFunds(CheckoutError):
    status = 400


class RoomClosed(CheckoutError):
    status = 409


class NetworkError(CheckoutError):
    """Transport failure talking to a collaborator; safe to retry."""
    status = 503
    retryable = True


class LedgerUnavailable(NetworkError):
    pass


class GatewayError(CheckoutError):
    status = 502


class OrderCreationError(CheckoutError):
    status = 502


class DuplicatePaymentCallback(CheckoutError):
    """A payment success was reported again for an already settled session."""
    status = 200

    def __init__(self, reference_id, contribution=None):
        super().__init__(f"Payment {reference_id} already recorded")
        self.reference_id = reference_id
        self.contribution = contribution
