"""Placement companies, rounds and application status changes."""

from __future__ import annotations

from support import ApiTestCase


class PlacementTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.student = self.create_student()
        self.company = self.create(
            "/api/placements/companies", {"name": "Globex", "ctc": "12 LPA"}
        )

    def _apply(self):
        return self.create(
            "/api/placements/applications",
            {"student": self.student["_id"], "company": self.company["_id"]},
        )

    def test_company_starts_open_without_rounds(self) -> None:
        self.assertEqual("open", self.company["status"])
        self.assertEqual([], self.company["rounds"])

    def test_round_is_linked_to_company(self) -> None:
        round_ = self.create(
            "/api/placements/rounds",
            {"company": self.company["_id"], "type": "technical", "date": "2025-11-20T10:00:00Z"},
        )

        [company] = self.client.get("/api/placements/companies").get_json()
        self.assertEqual([round_["_id"]], [item["_id"] for item in company["rounds"]])

        rounds = self.client.get(
            f"/api/placements/rounds?company={self.company['_id']}"
        ).get_json()
        self.assertEqual([round_["_id"]], [item["_id"] for item in rounds])
        self.assertEqual("Globex", rounds[0]["company"]["name"])

    def test_round_for_missing_company_is_not_found(self) -> None:
        response = self.post(
            "/api/placements/rounds",
            {"company": "507f1f77bcf86cd799439011", "type": "hr"},
        )

        self.assertEqual(404, response.status_code)
        self.assertEqual(0, self.count("placement_rounds"))

    def test_round_type_is_validated(self) -> None:
        response = self.post(
            "/api/placements/rounds", {"company": self.company["_id"], "type": "group"}
        )

        self.assertEqual(400, response.status_code)
        self.assertIn("PlacementRound validation failed", response.get_json()["error"])

    def test_application_starts_applied(self) -> None:
        application = self._apply()

        self.assertEqual("applied", application["status"])
        self.assertIn("appliedAt", application)

    def test_status_can_be_updated(self) -> None:
        application = self._apply()
        path = f"/api/placements/applications/{application['_id']}/status"

        selected = self.patch(path, {"status": "selected"}).get_json()
        reverted = self.patch(path, {"status": "applied"}).get_json()

        self.assertEqual("selected", selected["status"])
        self.assertEqual("applied", reverted["status"])

    def test_status_outside_enum_is_rejected(self) -> None:
        application = self._apply()

        response = self.patch(
            f"/api/placements/applications/{application['_id']}/status", {"status": "hired"}
        )

        self.assertEqual(400, response.status_code)

    def test_admit_card_upload(self) -> None:
        application = self._apply()

        response = self.patch(
            f"/api/placements/applications/{application['_id']}/admit-card",
            {"admitCardUrl": "https://files.campus.edu/admit/1.pdf"},
        )

        self.assertEqual(200, response.status_code)
        self.assertEqual(
            "https://files.campus.edu/admit/1.pdf", response.get_json()["admitCardUrl"]
        )

    def test_admit_card_on_missing_application_is_not_found(self) -> None:
        response = self.patch(
            "/api/placements/applications/507f1f77bcf86cd799439011/admit-card",
            {"admitCardUrl": "https://files.campus.edu/admit/1.pdf"},
        )

        self.assertEqual(404, response.status_code)
        self.assertEqual({"error": "PlacementApplication not found."}, response.get_json())

    def test_list_filters_applications_by_company(self) -> None:
        application = self._apply()
        other = self.create("/api/placements/companies", {"name": "Initech"})
        self.create(
            "/api/placements/applications",
            {"student": self.student["_id"], "company": other["_id"]},
        )

        listed = self.client.get(
            f"/api/placements/applications?company={self.company['_id']}"
        ).get_json()

        self.assertEqual([application["_id"]], [item["_id"] for item in listed])
        self.assertEqual("Globex", listed[0]["company"]["name"])
