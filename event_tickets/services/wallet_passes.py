"""
Apple Wallet and Google Wallet payload construction.

Only unsigned structures are built here. Signing the Apple manifest and the
Google save JWT needs certificates and service-account keys and happens in a
separate, trusted service.
"""

import logging
from typing import Any, Dict, Optional

from ..config import (
    EVENT_CLASS_ID,
    EVENT_LOCATION,
    EVENT_NAME,
    EVENT_SHORT_NAME,
    GOOGLE_HEX_BACKGROUND_COLOR,
    PASS_BACKGROUND_COLOR,
    PASS_FOREGROUND_COLOR,
    PASS_LABEL_COLOR,
    TERMS_TEXT,
    Settings,
)
from .models import TicketPayload, format_currency, ticket_type_display

logger = logging.getLogger(__name__)

APPLE_BARCODE_FORMAT = "PKBarcodeFormatQR"
APPLE_BARCODE_ENCODING = "iso-8859-1"
GOOGLE_BARCODE_TYPE = "QR_CODE"
GOOGLE_LANGUAGE = "en-US"


def build_apple_pass_fields(ticket: TicketPayload) -> Dict[str, Any]:
    """Map a ticket onto the Apple eventTicket field groups plus its barcode"""
    return {
        "primaryFields": [
            {"key": "name", "label": "ATTENDEE", "value": ticket.name}
        ],
        "secondaryFields": [
            {"key": "ticketType", "label": "TICKET TYPE", "value": ticket.ticket_type},
            {"key": "tickets", "label": "QUANTITY", "value": str(ticket.tickets)},
        ],
        "auxiliaryFields": [
            {"key": "email", "label": "EMAIL", "value": ticket.email}
        ],
        "backFields": [
            {"key": "ticketId", "label": "Ticket ID", "value": ticket.id},
            {"key": "totalAmount", "label": "Total Amount", "value": format_currency(ticket.total_amount)},
            {"key": "terms", "label": "Terms and Conditions", "value": TERMS_TEXT},
        ],
        "barcode": {
            "message": ticket.id,
            "format": APPLE_BARCODE_FORMAT,
            "messageEncoding": APPLE_BARCODE_ENCODING,
        },
    }


def build_apple_pass_json(ticket: TicketPayload, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Full unsigned pass.json for an event ticket"""
    settings = settings or Settings.from_env()
    fields = build_apple_pass_fields(ticket)
    barcode = fields.pop("barcode")

    pass_data = {
        "formatVersion": 1,
        "passTypeIdentifier": settings.pass_type_id,
        "teamIdentifier": settings.team_id,
        "organizationName": settings.organization,
        "description": f"{EVENT_SHORT_NAME} Event Ticket",
        "serialNumber": ticket.id,
        "logoText": EVENT_SHORT_NAME,
        "foregroundColor": PASS_FOREGROUND_COLOR,
        "backgroundColor": PASS_BACKGROUND_COLOR,
        "labelColor": PASS_LABEL_COLOR,
        "eventTicket": fields,
        "barcode": barcode,
        "barcodes": [barcode],
    }
    logger.info(f"Built Apple pass.json for ticket {ticket.id}")
    return pass_data


def _localized(value: str) -> Dict[str, Any]:
    return {"defaultValue": {"language": GOOGLE_LANGUAGE, "value": value}}


def google_class_id(issuer_id: str) -> str:
    return f"{issuer_id}.{EVENT_CLASS_ID}"


def build_google_pass_object(ticket: TicketPayload, issuer_id: Optional[str] = None) -> Dict[str, Any]:
    """Map a ticket onto a Google Wallet eventTicketObject

    Without ``issuer_id`` the issuer comes from GOOGLE_WALLET_ISSUER_ID.
    """
    issuer_id = issuer_id or Settings.from_env().google_issuer_id
    return {
        "id": f"{issuer_id}.{ticket.id}",
        "classId": google_class_id(issuer_id),
        "state": "ACTIVE",
        "ticketHolderName": ticket.name,
        "ticketNumber": ticket.id,
        "barcode": {"type": GOOGLE_BARCODE_TYPE, "value": ticket.id},
        "eventName": _localized(EVENT_SHORT_NAME),
        "seatInfo": {
            "seat": _localized(f"{ticket.ticket_type} - {ticket.tickets} ticket(s)")
        },
        "ticketType": _localized(ticket_type_display(ticket.ticket_type)),
        "hexBackgroundColor": GOOGLE_HEX_BACKGROUND_COLOR,
    }


def build_google_event_class(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """eventTicketClass body, created once per issuer"""
    settings = settings or Settings.from_env()
    return {
        "id": google_class_id(settings.google_issuer_id),
        "issuerName": settings.organization,
        "eventName": _localized(EVENT_NAME),
        "venue": {
            "name": _localized(EVENT_LOCATION.split(",")[0]),
            "address": _localized(EVENT_LOCATION),
        },
        "reviewStatus": "UNDER_REVIEW",
        "hexBackgroundColor": GOOGLE_HEX_BACKGROUND_COLOR,
    }


def build_google_save_claims(ticket: TicketPayload, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Unsigned "save to wallet" JWT claims for one ticket"""
    settings = settings or Settings.from_env()
    claims = {
        "iss": settings.google_service_account_email,
        "aud": "google",
        "origins": [],
        "typ": "savetowallet",
        "payload": {
            "eventTicketObjects": [build_google_pass_object(ticket, settings.google_issuer_id)]
        },
    }
    logger.info(f"Built Google Wallet claims for ticket {ticket.id}")
    return claims
