"""
Ticket error codes and exceptions.
"""

from enum import Enum


class ErrorCode(Enum):
    """Ticket error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    CHECKSUM_UNAVAILABLE = "CHECKSUM_UNAVAILABLE"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"


class TicketError(Exception):
    """Base ticket error with code and user-safe message."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInput(TicketError):
    """Raised when required registration or ticket fields are missing or malformed."""

    code = ErrorCode.INVALID_INPUT


class ChecksumUnavailable(TicketError):
    """Raised when the SHA-256 primitive cannot be used."""

    code = ErrorCode.CHECKSUM_UNAVAILABLE

    def __init__(self, reason: str):
        super().__init__(f"Ticket checksum could not be computed: {reason}")
        self.reason = reason


class PayloadTooLarge(TicketError):
    """Raised when the ticket text does not fit in any QR version."""

    code = ErrorCode.PAYLOAD_TOO_LARGE

    def __init__(self, size: int):
        super().__init__(f"Ticket payload of {size} bytes exceeds QR code capacity")
        self.size = size


class RegistrationNotFound(TicketError):
    """Raised when a ticket is requested for an id the store does not hold."""

    code = ErrorCode.REGISTRATION_NOT_FOUND

    def __init__(self, registration_id: str):
        super().__init__(f"Registration not found: {registration_id}")
        self.registration_id = registration_id
