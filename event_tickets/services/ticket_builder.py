"""
Ticket payload construction and checksum computation.
"""

import hashlib
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import EVENT_DATE
from .errors import ChecksumUnavailable, InvalidInput
from .models import (
    TicketPayload,
    canonical_json,
    coerce_amount,
    coerce_tickets,
    is_ticket_type,
    normalize_ticket_type,
)

logger = logging.getLogger(__name__)


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2026-04-04T18:00:00.000Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def compute_checksum(fields: Dict[str, Any]) -> str:
    """SHA-256 hex digest of the canonical JSON of ``fields``.

    ``fields`` must not contain the checksum itself; callers pass
    ``TicketPayload.checksum_fields()`` or an equivalent ordered mapping.
    """
    data = canonical_json(fields).encode("utf-8")
    try:
        digest = hashlib.sha256(data)
    except (AttributeError, ValueError) as e:
        logger.error(f"SHA-256 unavailable: {e}")
        raise ChecksumUnavailable(str(e)) from e
    return digest.hexdigest()


def _attendee_name(form_data: Dict[str, Any]) -> str:
    name = form_data.get("name")
    if not name:
        first = str(form_data.get("firstName") or "").strip()
        last = str(form_data.get("lastName") or "").strip()
        name = f"{first} {last}".strip()
    return str(name or "").strip()


def build_ticket_payload(registration_id: str, form_data: Dict[str, Any],
                         now: Optional[datetime] = None) -> TicketPayload:
    """
    Build the checksummed ticket payload for a persisted registration.

    Args:
        registration_id: Identifier assigned by the registration store
        form_data: Registration form fields (name or firstName/lastName, email,
            ticketType, optional tickets and totalAmount)
        now: Build time; defaults to the current UTC time

    Returns:
        TicketPayload with its checksum set

    Raises:
        InvalidInput: If the id or a required identity field is missing,
            or the ticket type is unknown
        ChecksumUnavailable: If SHA-256 cannot be computed
    """
    if not isinstance(registration_id, str) or not registration_id.strip():
        raise InvalidInput("Registration id is required")
    if not isinstance(form_data, dict):
        raise InvalidInput("Form data must be an object")

    name = _attendee_name(form_data)
    email = str(form_data.get("email") or "").strip()
    ticket_type = normalize_ticket_type(str(form_data.get("ticketType") or ""))

    missing = [label for label, value in
               (("name", name), ("email", email), ("ticketType", ticket_type)) if not value]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")
    if not is_ticket_type(ticket_type):
        raise InvalidInput(f"Unknown ticket type: {ticket_type}")

    unsigned = TicketPayload(
        id=registration_id,
        name=name,
        email=email,
        ticket_type=ticket_type,
        tickets=coerce_tickets(form_data.get("tickets")),
        total_amount=coerce_amount(form_data.get("totalAmount")),
        event_date=EVENT_DATE,
        registered_at=iso_timestamp(now or datetime.now(timezone.utc)),
    )
    checksum = compute_checksum(unsigned.checksum_fields())

    payload = replace(unsigned, checksum=checksum)
    logger.info(f"Built ticket payload for registration {registration_id} ({ticket_type} x{payload.tickets})")
    return payload
