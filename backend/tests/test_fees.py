"""Fee creation, listing and the mark-paid transition."""

from __future__ import annotations

from support import ApiTestCase


class FeeTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.student = self.create_student()

    def _create_fee(self, **overrides):
        payload = {
            "student": self.student["_id"],
            "amount": 500,
            "dueDate": "2025-12-01T00:00:00Z",
        }
        payload.update(overrides)
        return self.create("/api/fees", payload)

    def test_create_defaults_to_unpaid(self) -> None:
        fee = self._create_fee()

        self.assertEqual("Unpaid", fee["status"])
        self.assertNotIn("paidAt", fee)
        self.assertEqual(self.student["_id"], fee["student"])
        self.assertEqual("2025-12-01T00:00:00.000Z", fee["dueDate"])
        self.assertTrue(fee["createdAt"].endswith("Z"))
        self.assertEqual(24, len(fee["_id"]))

    def test_status_cannot_be_set_on_create(self) -> None:
        fee = self._create_fee(status="Paid")

        self.assertEqual("Unpaid", fee["status"])

    def test_missing_amount_is_rejected(self) -> None:
        response = self.post("/api/fees", {"student": self.student["_id"]})

        self.assertEqual(400, response.status_code)
        body = response.get_json()
        self.assertIn("Fee validation failed", body["error"])
        self.assertIn("amount", body["details"])
        self.assertEqual(0, self.count("fees"))

    def test_malformed_student_reference_is_rejected(self) -> None:
        response = self.post("/api/fees", {"student": "not-an-id", "amount": 10})

        self.assertEqual(400, response.status_code)
        self.assertIn("student", response.get_json()["details"])
        self.assertEqual(0, self.count("fees"))

    def test_non_json_body_is_rejected(self) -> None:
        response = self.client.post("/api/fees", data="amount=10")

        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": "Request body must be JSON."}, response.get_json())

    def test_mark_paid_sets_status_and_timestamp(self) -> None:
        fee = self._create_fee()

        response = self.patch(f"/api/fees/{fee['_id']}/paid")

        self.assertEqual(200, response.status_code)
        paid = response.get_json()
        self.assertEqual("Paid", paid["status"])
        self.assertGreaterEqual(paid["paidAt"], fee["createdAt"])
        self.assertEqual(fee["createdAt"], paid["createdAt"])

    def test_mark_paid_twice_keeps_first_payment(self) -> None:
        fee = self._create_fee()

        first = self.patch(f"/api/fees/{fee['_id']}/paid").get_json()
        second = self.patch(f"/api/fees/{fee['_id']}/paid").get_json()

        self.assertEqual(first, second)

    def test_mark_paid_unknown_fee_is_not_found(self) -> None:
        response = self.patch("/api/fees/507f1f77bcf86cd799439011/paid")

        self.assertEqual(404, response.status_code)
        self.assertEqual({"error": "Fee not found."}, response.get_json())

    def test_mark_paid_malformed_id_is_bad_request(self) -> None:
        response = self.patch("/api/fees/abc/paid")

        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": "Invalid _id: abc"}, response.get_json())

    def test_list_populates_student(self) -> None:
        self._create_fee()

        response = self.client.get("/api/fees")

        self.assertEqual(200, response.status_code)
        [fee] = response.get_json()
        self.assertEqual("Asha Rao", fee["student"]["name"])
        self.assertEqual(self.student["_id"], fee["student"]["_id"])

    def test_list_filters_by_status(self) -> None:
        unpaid = self._create_fee()
        paid = self._create_fee(amount=250)
        self.patch(f"/api/fees/{paid['_id']}/paid")

        response = self.client.get("/api/fees?status=Unpaid")

        self.assertEqual([unpaid["_id"]], [fee["_id"] for fee in response.get_json()])

    def test_list_rejects_malformed_reference_filter(self) -> None:
        response = self.client.get("/api/fees?student=xyz")

        self.assertEqual(400, response.status_code)

    def test_fee_creation_is_not_broadcast(self) -> None:
        self._create_fee()

        self.assertEqual([], self.broadcaster.events)
