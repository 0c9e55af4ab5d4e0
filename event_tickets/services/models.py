"""
Data models for registrations and ticket payloads.
"""

import json
import math
import re
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..config import EVENT_DATE
from .errors import InvalidInput

Number = Union[int, float]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class TicketType(str, Enum):
    GENERAL_ADMISSION = "general-admission"
    VIP_SINGLE = "vip-single"
    FAMILY_PACKAGE = "family-package"
    VIP_FAMILY_PACKAGE = "vip-family-package"


# Older form versions used these values
TICKET_TYPE_ALIASES = {
    "vip-experience": TicketType.VIP_SINGLE.value,
}

TICKET_TYPE_DISPLAY = {
    TicketType.GENERAL_ADMISSION.value: "General Admission",
    TicketType.VIP_SINGLE.value: "VIP Experience Single",
    TicketType.FAMILY_PACKAGE.value: "Family Package",
    TicketType.VIP_FAMILY_PACKAGE.value: "VIP Family Package",
}


def normalize_ticket_type(ticket_type: Any) -> Any:
    """Trim a ticket type and map legacy aliases onto the current values"""
    if isinstance(ticket_type, str):
        value = ticket_type.strip()
        return TICKET_TYPE_ALIASES.get(value, value)
    return ticket_type


def is_ticket_type(value: Any) -> bool:
    return value in {t.value for t in TicketType}


class PaymentMethod(str, Enum):
    ZELLE = "zelle"
    VENMO = "venmo"
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit-card"


class RegistrationStatus(str, Enum):
    CONFIRMED = "confirmed"


def coerce_tickets(value: Any) -> int:
    """Parse a ticket count the way the registration form does; anything unusable becomes 1."""
    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 1
        count = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 1
        count = int(match.group(1))
    return count if count > 0 else 1


def coerce_amount(value: Any) -> Number:
    """Parse a total amount; anything non-numeric or negative becomes 0.

    Whole amounts come back as int so they serialize as ``200`` rather than ``200.0``.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        match = _LEADING_FLOAT.match(str(value))
        if not match:
            return 0
        amount = float(match.group(1))
    if not math.isfinite(amount) or amount <= 0:
        return 0
    return int(amount) if amount.is_integer() else amount


def canonical_json(data: Dict[str, Any]) -> str:
    """Compact JSON in insertion order, non-ASCII text kept as-is"""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def format_currency(amount: Number) -> str:
    return f"${amount:,.2f}"


def ticket_type_display(ticket_type: str) -> str:
    return TICKET_TYPE_DISPLAY.get(ticket_type, ticket_type)


@dataclass(frozen=True)
class TicketPayload:
    """Canonical ticket record embedded in the QR code"""

    id: str
    name: str
    email: str
    ticket_type: str
    tickets: int
    total_amount: Number
    event_date: str
    registered_at: str
    checksum: str = ""

    def checksum_fields(self) -> "OrderedDict[str, Any]":
        """The eight checksummed fields, in serialization order"""
        return OrderedDict([
            ("id", self.id),
            ("name", self.name),
            ("email", self.email),
            ("ticketType", self.ticket_type),
            ("tickets", self.tickets),
            ("totalAmount", self.total_amount),
            ("eventDate", self.event_date),
            ("registeredAt", self.registered_at),
        ])

    def to_dict(self) -> "OrderedDict[str, Any]":
        data = self.checksum_fields()
        data["checksum"] = self.checksum
        return data

    def to_json(self) -> str:
        return canonical_json(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TicketPayload":
        """Rebuild a payload from its JSON shape (e.g. ticket data posted back by a client)"""
        if not isinstance(data, dict):
            raise InvalidInput("Ticket data must be an object")
        missing = [k for k in ("id", "name", "email", "ticketType") if not data.get(k)]
        if missing:
            raise InvalidInput(f"Missing required ticket fields: {', '.join(missing)}")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            ticket_type=str(data["ticketType"]),
            tickets=coerce_tickets(data.get("tickets")),
            total_amount=coerce_amount(data.get("totalAmount")),
            event_date=str(data.get("eventDate") or EVENT_DATE),
            registered_at=str(data.get("registeredAt") or ""),
            checksum=str(data.get("checksum") or ""),
        )


@dataclass(frozen=True)
class RegistrationRecord:
    """A submitted registration as written to the document store"""

    first_name: str
    last_name: str
    email: str
    ticket_type: str
    tickets: int
    payment_method: str
    total_amount: Number
    submitted_at: str
    phone: str = ""
    special_needs: str = ""
    status: str = RegistrationStatus.CONFIRMED.value
    id: Optional[str] = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_document(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "ticketType": self.ticket_type,
            "tickets": self.tickets,
            "specialNeeds": self.special_needs,
            "paymentMethod": self.payment_method,
            "totalAmount": self.total_amount,
            "registeredAt": self.submitted_at,
            "status": self.status,
        }

    def to_form_data(self) -> Dict[str, Any]:
        """Shape consumed by the ticket builder"""
        return {
            "name": self.name,
            "email": self.email,
            "ticketType": self.ticket_type,
            "tickets": self.tickets,
            "totalAmount": self.total_amount,
        }
