"""
Registration-to-ticket orchestration.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import InvalidInput, RegistrationNotFound
from .models import RegistrationRecord, TicketPayload
from .qr_encoder import encode_qr
from .registration import InMemoryRegistrationStore, RegistrationStore, record_from_form
from .ticket_builder import build_ticket_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedTicket:
    """A complete ticket: checksummed payload plus its QR image"""

    payload: TicketPayload
    qr_code_data_url: str

    def to_response(self) -> Dict[str, Any]:
        return {
            "id": self.payload.id,
            "ticket": self.payload.to_dict(),
            "qrCodeDataUrl": self.qr_code_data_url,
        }


class TicketService:
    """Runs the registration flow against a registration store"""

    def __init__(self, store: Optional[RegistrationStore] = None):
        self.store = store or InMemoryRegistrationStore()

    def _issue(self, record: RegistrationRecord) -> IssuedTicket:
        # Both steps must succeed before anything is returned
        payload = build_ticket_payload(record.id, record.to_form_data())
        qr_code = encode_qr(payload)
        return IssuedTicket(payload=payload, qr_code_data_url=qr_code)

    def issue_ticket(self, registration_id: str) -> IssuedTicket:
        """
        Re-issue the ticket for a stored registration.

        Ticket fields always come from the stored record, never from the caller.

        Raises:
            InvalidInput: If no id is given
            RegistrationNotFound: If the store has no record for the id
        """
        if not isinstance(registration_id, str) or not registration_id.strip():
            raise InvalidInput("Registration id is required")

        record = self.store.get(registration_id)
        if record is None:
            raise RegistrationNotFound(registration_id)
        return self._issue(record)

    def register(self, form_data: Dict[str, Any]) -> IssuedTicket:
        """Validate, price and persist a registration, then issue its ticket"""
        record = record_from_form(form_data)
        registration_id = self.store.add(record)
        logger.info(f"Registration {registration_id} confirmed ({record.ticket_type} x{record.tickets})")
        return self._issue(self.store.get(registration_id))
