"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license key is not known to the store."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseAlreadyActiveError(LicenseException):
    """Raised when activating a license that is already active."""

    def __init__(self, message: str = "License is already active"):
        super().__init__(message, code="LICENSE_ALREADY_ACTIVE")


class LicenseStateConflictError(LicenseException):
    """Raised when a conditional update finds the license in another state."""

    def __init__(self, message: str = "License state changed concurrently"):
        super().__init__(message, code="LICENSE_STATE_CONFLICT")


class EmailMissingError(LicenseException):
    """Raised when issuing a license without an owning email."""

    def __init__(self, message: str = "An email is required to issue a license"):
        super().__init__(message, code="EMAIL_MISSING")


class InvalidEmailError(LicenseException):
    """Raised when an email address is malformed."""

    def __init__(self, message: str = "Invalid email address"):
        super().__init__(message, code="INVALID_EMAIL")


class InvalidCountError(LicenseException):
    """Raised when a batch size is out of range."""

    def __init__(self, message: str = "Invalid license count"):
        super().__init__(message, code="INVALID_COUNT")


class PaymentEventException(DomainException):
    """Base exception for inbound payment and order events."""

    pass


class AuthenticityError(PaymentEventException):
    """Raised when an event signature does not match its payload."""

    def __init__(self, message: str = "Invalid event signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class MalformedEventError(PaymentEventException):
    """Raised when a verified event lacks required fields."""

    def __init__(self, message: str = "Malformed event"):
        super().__init__(message, code="MALFORMED_EVENT")


class PaymentGatewayError(PaymentEventException):
    """Raised when the payment processor API call fails."""

    def __init__(self, message: str = "Payment processor unavailable"):
        super().__init__(message, code="PAYMENT_GATEWAY_ERROR")


class CheckoutSessionNotFoundError(PaymentEventException):
    """Raised when a checkout session cannot be resolved to a customer."""

    def __init__(self, message: str = "Checkout session not found"):
        super().__init__(message, code="CHECKOUT_SESSION_NOT_FOUND")


class StoreError(DomainException):
    """Raised when the license store fails to persist or read records."""

    def __init__(self, message: str = "License store failure", code: str = "STORE_ERROR"):
        super().__init__(message, code=code)


class DuplicateLicenseError(StoreError):
    """Raised when an insert violates a uniqueness constraint."""

    def __init__(self, message: str = "License already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE")


class AnnotationError(DomainException):
    """Raised when the order system cannot be annotated with a license key."""

    def __init__(self, message: str = "Order annotation failed"):
        super().__init__(message, code="ANNOTATION_FAILED")
