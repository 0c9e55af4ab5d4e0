"""
Registration intake: form validation, pricing and the persistence seam.
"""

import logging
import secrets
import string
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator

from .errors import InvalidInput
from .models import (
    Number,
    PaymentMethod,
    RegistrationRecord,
    RegistrationStatus,
    TicketType,
    coerce_tickets,
    normalize_ticket_type,
)
from .ticket_builder import iso_timestamp

logger = logging.getLogger(__name__)

# Price in dollars; per person for single tickets, per family for packages
TICKET_PRICES = {
    TicketType.GENERAL_ADMISSION.value: 50,
    TicketType.VIP_SINGLE.value: 125,
    TicketType.FAMILY_PACKAGE.value: 150,
    TicketType.VIP_FAMILY_PACKAGE.value: 500,
}

REGISTRATION_SCHEMA = {
    "type": "object",
    "required": ["firstName", "lastName", "email", "ticketType", "paymentMethod"],
    "properties": {
        "firstName": {"type": "string", "minLength": 1, "maxLength": 100},
        "lastName": {"type": "string", "minLength": 1, "maxLength": 100},
        "email": {
            "type": "string",
            "pattern": r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
        },
        "phone": {"type": "string", "maxLength": 30},
        "ticketType": {"type": "string", "enum": [t.value for t in TicketType]},
        "tickets": {"type": ["integer", "string"]},
        "specialNeeds": {"type": "string", "maxLength": 2000},
        "paymentMethod": {"type": "string", "enum": [m.value for m in PaymentMethod]},
    },
}

_validator = Draft7Validator(REGISTRATION_SCHEMA)


def validate_registration(form_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a registration form body.

    Returns a normalized copy (trimmed strings, canonical ticket type).

    Raises:
        InvalidInput: With the first schema violation found
    """
    if not isinstance(form_data, dict):
        raise InvalidInput("Registration must be an object")

    data = {k: (v.strip() if isinstance(v, str) else v) for k, v in form_data.items()}
    if "ticketType" in data:
        data["ticketType"] = normalize_ticket_type(data["ticketType"])

    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        error = errors[0]
        field = ".".join(str(p) for p in error.path) or "registration"
        logger.warning(f"Registration rejected: {field}: {error.message}")
        raise InvalidInput(f"{field}: {error.message}")
    return data


def calculate_total(ticket_type: str, tickets: Any) -> Number:
    """Total price for ``tickets`` of ``ticket_type``"""
    ticket_type = normalize_ticket_type(ticket_type)
    if ticket_type not in TICKET_PRICES:
        raise InvalidInput(f"Unknown ticket type: {ticket_type}")
    return TICKET_PRICES[ticket_type] * coerce_tickets(tickets)


def record_from_form(form_data: Dict[str, Any], now: Optional[datetime] = None) -> RegistrationRecord:
    """Validate a form body and turn it into a confirmed registration record"""
    data = validate_registration(form_data)
    tickets = coerce_tickets(data.get("tickets"))
    return RegistrationRecord(
        first_name=data["firstName"],
        last_name=data["lastName"],
        email=data["email"],
        phone=data.get("phone") or "",
        ticket_type=data["ticketType"],
        tickets=tickets,
        special_needs=data.get("specialNeeds") or "",
        payment_method=data["paymentMethod"],
        total_amount=calculate_total(data["ticketType"], tickets),
        submitted_at=iso_timestamp(now or datetime.now(timezone.utc)),
        status=RegistrationStatus.CONFIRMED.value,
    )


class RegistrationStore(ABC):
    """Interface for registration persistence."""

    @abstractmethod
    def add(self, record: RegistrationRecord) -> str:
        """Persist a record and return its assigned id."""
        ...

    @abstractmethod
    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        """Return a record by id, or None if not found."""
        ...

    @abstractmethod
    def list(self, search: Optional[str] = None,
             ticket_type: Optional[str] = None) -> List[RegistrationRecord]:
        """
        Return records newest first.

        Args:
            search: Case-insensitive text matched against first name, last name and email
            ticket_type: Only records of this type; None or "all" for every type
        """
        ...


class InMemoryRegistrationStore(RegistrationStore):
    """Process-local store with document-database style ids"""

    ID_ALPHABET = string.ascii_letters + string.digits
    ID_LENGTH = 20

    def __init__(self):
        self._records: Dict[str, RegistrationRecord] = {}
        self._lock = threading.Lock()

    def _new_id(self) -> str:
        return "".join(secrets.choice(self.ID_ALPHABET) for _ in range(self.ID_LENGTH))

    def add(self, record: RegistrationRecord) -> str:
        with self._lock:
            registration_id = self._new_id()
            while registration_id in self._records:
                registration_id = self._new_id()
            self._records[registration_id] = replace(record, id=registration_id)
        logger.info(f"Stored registration {registration_id}")
        return registration_id

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        with self._lock:
            return self._records.get(registration_id)

    def list(self, search: Optional[str] = None,
             ticket_type: Optional[str] = None) -> List[RegistrationRecord]:
        with self._lock:
            records = list(self._records.values())

        term = (search or "").strip().casefold()
        if term:
            records = [r for r in records
                       if any(term in value.casefold() for value in (r.first_name, r.last_name, r.email))]

        ticket_type = normalize_ticket_type(ticket_type)
        if ticket_type and ticket_type != "all":
            records = [r for r in records if r.ticket_type == ticket_type]

        return sorted(records, key=lambda r: r.submitted_at, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
