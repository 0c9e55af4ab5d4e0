"""
Ticket services.

Builds checksummed ticket payloads, renders them as QR codes and maps them
onto Apple Wallet and Google Wallet pass structures.
"""

from .errors import ChecksumUnavailable, InvalidInput, PayloadTooLarge, RegistrationNotFound, TicketError
from .models import RegistrationRecord, TicketPayload
from .qr_encoder import encode_qr
from .ticket_builder import build_ticket_payload, compute_checksum
from .ticket_service import IssuedTicket, TicketService
from .wallet_passes import build_apple_pass_fields, build_google_pass_object

__all__ = [
    "TicketError",
    "InvalidInput",
    "ChecksumUnavailable",
    "PayloadTooLarge",
    "RegistrationNotFound",
    "RegistrationRecord",
    "TicketPayload",
    "build_ticket_payload",
    "compute_checksum",
    "encode_qr",
    "build_apple_pass_fields",
    "build_google_pass_object",
    "IssuedTicket",
    "TicketService",
]
