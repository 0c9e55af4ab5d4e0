"""
API tests for the event tickets backend.
"""

import unittest
from unittest import mock

from fastapi.testclient import TestClient

from event_tickets import main
from event_tickets.services.models import RegistrationRecord
from event_tickets.services.rate_limiter import RateLimiter
from event_tickets.services.ticket_service import TicketService

FORM = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@example.com",
    "ticketType": "family-package",
    "tickets": 4,
    "paymentMethod": "venmo",
}


class TestAPI(unittest.TestCase):

    def setUp(self):
        self.service = TicketService()
        for name, value in (("ticket_service", self.service),
                            ("rate_limiter", RateLimiter(max_requests=2, window_seconds=300))):
            patcher = mock.patch.object(main, name, value)
            patcher.start()
            self.addCleanup(patcher.stop)
        self.client = TestClient(main.app)

    def _register(self):
        response = self.client.post("/api/registrations", json=FORM)
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_health(self):
        self.assertEqual(self.client.get("/").json()["status"], "healthy")
        services = self.client.get("/api/health").json()["services"]
        self.assertTrue(services["registrations"])

    def test_register(self):
        body = self._register()
        self.assertTrue(body["ok"])
        self.assertIsNotNone(self.service.store.get(body["id"]))
        self.assertEqual(body["ticket"]["id"], body["id"])
        self.assertEqual(body["ticket"]["totalAmount"], 600)
        self.assertEqual(len(body["ticket"]["checksum"]), 64)
        self.assertTrue(body["qrCodeDataUrl"].startswith("data:image/png;base64,"))

    def test_register_invalid(self):
        response = self.client.post("/api/registrations", json={**FORM, "paymentMethod": "bitcoin"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["ok"])
        self.assertIn("paymentMethod", response.json()["error"])

    def test_register_body_must_be_an_object(self):
        response = self.client.post("/api/registrations", json=["Jane"])
        self.assertEqual(response.status_code, 400)

        body = response.json()
        self.assertEqual(set(body), {"ok", "error"})
        self.assertFalse(body["ok"])
        self.assertIn("body", body["error"])

    def test_register_rate_limited(self):
        for _ in range(2):
            self._register()
        response = self.client.post("/api/registrations", json=FORM)
        self.assertEqual(response.status_code, 429)
        self.assertIn("reset_time", response.json())

    def test_issue_ticket(self):
        registration_id = self._register()["id"]

        response = self.client.post("/api/tickets", json={"registrationId": registration_id})
        self.assertEqual(response.status_code, 200)
        ticket = response.json()["ticket"]
        self.assertEqual(ticket["id"], registration_id)
        self.assertEqual(ticket["tickets"], 4)
        self.assertEqual(ticket["eventDate"], "2026-04-04")
        self.assertEqual(list(ticket)[-1], "checksum")

    def test_issue_ticket_ignores_client_fields(self):
        registration_id = self._register()["id"]

        response = self.client.post("/api/tickets", json={
            "registrationId": registration_id,
            "formData": {"name": "Someone Else", "ticketType": "vip-family-package", "totalAmount": 1},
        })
        ticket = response.json()["ticket"]
        self.assertEqual(ticket["name"], "Jane Doe")
        self.assertEqual(ticket["ticketType"], "family-package")
        self.assertEqual(ticket["totalAmount"], 600)

    def test_issue_ticket_unknown_registration(self):
        response = self.client.post("/api/tickets", json={"registrationId": "abc123"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"ok": False, "error": "Registration not found: abc123"})

    def test_issue_ticket_requires_id(self):
        response = self.client.post("/api/tickets", json={})
        self.assertEqual(response.status_code, 400)
        self.assertIn("registrationId", response.json()["error"])

    def test_issue_ticket_payload_too_large(self):
        # Written straight to the store; the form schema caps name length
        registration_id = self.service.store.add(RegistrationRecord(
            first_name="x" * 3000,
            last_name="Doe",
            email="jane@example.com",
            ticket_type="family-package",
            tickets=1,
            payment_method="cash",
            total_amount=150,
            submitted_at="2026-03-01T10:00:00.000Z",
        ))
        response = self.client.post("/api/tickets", json={"registrationId": registration_id})
        self.assertEqual(response.status_code, 413)
        self.assertFalse(response.json()["ok"])

    def test_apple_wallet(self):
        ticket = self._register()["ticket"]
        response = self.client.post("/api/wallet/apple", json={"ticketData": ticket})
        self.assertEqual(response.status_code, 200)

        pass_json = response.json()
        self.assertEqual(pass_json["serialNumber"], ticket["id"])
        self.assertEqual(pass_json["barcode"]["message"], ticket["id"])
        quantity = [f for f in pass_json["eventTicket"]["secondaryFields"] if f["key"] == "tickets"]
        self.assertEqual(quantity[0]["value"], "4")

    def test_apple_wallet_requires_ticket(self):
        response = self.client.post("/api/wallet/apple", json={})
        self.assertEqual(response.status_code, 400)
        self.assertIn("ticketData", response.json()["error"])

    def test_google_wallet(self):
        ticket = self._register()["ticket"]
        response = self.client.post("/api/wallet/google", json={"ticketData": ticket})
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertTrue(body["object"]["id"].endswith(f".{ticket['id']}"))
        self.assertEqual(body["object"]["barcode"], {"type": "QR_CODE", "value": ticket["id"]})
        self.assertEqual(body["claims"]["payload"]["eventTicketObjects"], [body["object"]])


if __name__ == "__main__":
    unittest.main()
