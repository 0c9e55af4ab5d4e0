"""
Tests for Apple and Google wallet payload construction.
"""

import os
import unittest
from datetime import datetime, timezone
from unittest import mock

from event_tickets.config import EVENT_CLASS_ID, EVENT_SHORT_NAME, TERMS_TEXT, Settings
from event_tickets.services.ticket_builder import build_ticket_payload
from event_tickets.services.wallet_passes import (
    build_apple_pass_fields,
    build_apple_pass_json,
    build_google_event_class,
    build_google_pass_object,
    build_google_save_claims,
)

ISSUER = "3388000000012345678"


def _ticket():
    return build_ticket_payload("abc123", {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "ticketType": "family-package",
        "tickets": 4,
        "totalAmount": 200,
    }, now=datetime(2026, 3, 1, 10, 0, 0, tzinfo=timezone.utc))


def _values(fields):
    return {field["key"]: field["value"] for field in fields}


class TestApplePassFields(unittest.TestCase):

    def setUp(self):
        self.ticket = _ticket()
        self.fields = build_apple_pass_fields(self.ticket)

    def test_barcode_carries_ticket_id(self):
        self.assertEqual(self.fields["barcode"]["message"], "abc123")
        self.assertEqual(self.fields["barcode"]["format"], "PKBarcodeFormatQR")
        self.assertEqual(self.fields["barcode"]["messageEncoding"], "iso-8859-1")

    def test_quantity_is_a_string(self):
        secondary = _values(self.fields["secondaryFields"])
        self.assertEqual(secondary["tickets"], "4")
        self.assertIsInstance(secondary["tickets"], str)
        self.assertEqual(secondary["ticketType"], "family-package")

    def test_field_groups(self):
        self.assertEqual(_values(self.fields["primaryFields"]), {"name": "Jane Doe"})
        self.assertEqual(_values(self.fields["auxiliaryFields"]), {"email": "jane@example.com"})
        self.assertEqual(_values(self.fields["backFields"]), {
            "ticketId": "abc123",
            "totalAmount": "$200.00",
            "terms": TERMS_TEXT,
        })

    def test_pure_mapping(self):
        self.assertEqual(build_apple_pass_fields(self.ticket), self.fields)

    def test_pass_json_wraps_fields(self):
        settings = Settings(pass_type_id="pass.com.example.test", team_id="ABCDE12345")
        pass_json = build_apple_pass_json(self.ticket, settings)

        self.assertEqual(pass_json["formatVersion"], 1)
        self.assertEqual(pass_json["passTypeIdentifier"], "pass.com.example.test")
        self.assertEqual(pass_json["teamIdentifier"], "ABCDE12345")
        self.assertEqual(pass_json["serialNumber"], "abc123")
        self.assertNotIn("barcode", pass_json["eventTicket"])
        self.assertEqual(pass_json["barcodes"], [pass_json["barcode"]])
        self.assertEqual(pass_json["eventTicket"]["primaryFields"], self.fields["primaryFields"])


class TestGooglePassObject(unittest.TestCase):

    def setUp(self):
        self.ticket = _ticket()
        self.obj = build_google_pass_object(self.ticket, ISSUER)

    def test_issuer_qualified_ids(self):
        self.assertEqual(self.obj["id"], f"{ISSUER}.abc123")
        self.assertEqual(self.obj["classId"], f"{ISSUER}.{EVENT_CLASS_ID}")

    def test_holder_and_barcode(self):
        self.assertEqual(self.obj["state"], "ACTIVE")
        self.assertEqual(self.obj["ticketHolderName"], "Jane Doe")
        self.assertEqual(self.obj["ticketNumber"], "abc123")
        self.assertEqual(self.obj["barcode"], {"type": "QR_CODE", "value": "abc123"})

    def test_localized_strings(self):
        self.assertEqual(self.obj["eventName"]["defaultValue"]["value"], EVENT_SHORT_NAME)
        self.assertEqual(
            self.obj["seatInfo"]["seat"]["defaultValue"]["value"],
            "family-package - 4 ticket(s)",
        )
        self.assertEqual(self.obj["seatInfo"]["seat"]["defaultValue"]["language"], "en-US")
        self.assertEqual(self.obj["ticketType"]["defaultValue"]["value"], "Family Package")

    def test_issuer_defaults_to_environment(self):
        with mock.patch.dict(os.environ, {"GOOGLE_WALLET_ISSUER_ID": "3388000000099999999"}):
            obj = build_google_pass_object(self.ticket)
        self.assertEqual(obj["id"], "3388000000099999999.abc123")
        self.assertEqual(obj["classId"], f"3388000000099999999.{EVENT_CLASS_ID}")

    def test_save_claims(self):
        settings = Settings(google_issuer_id=ISSUER, google_service_account_email="wallet@example.iam.gserviceaccount.com")
        claims = build_google_save_claims(self.ticket, settings)

        self.assertEqual(claims["iss"], "wallet@example.iam.gserviceaccount.com")
        self.assertEqual(claims["aud"], "google")
        self.assertEqual(claims["typ"], "savetowallet")
        self.assertEqual(claims["payload"]["eventTicketObjects"], [self.obj])

    def test_event_class(self):
        event_class = build_google_event_class(Settings(google_issuer_id=ISSUER))
        self.assertEqual(event_class["id"], self.obj["classId"])
        self.assertEqual(event_class["reviewStatus"], "UNDER_REVIEW")


if __name__ == "__main__":
    unittest.main()
