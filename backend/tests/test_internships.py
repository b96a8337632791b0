"""Internship batches, companies and enrolment."""

from __future__ import annotations

from support import ApiTestCase


class InternshipBatchTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.student = self.create_student()
        self.batch = self.create(
            "/api/internships/batches", {"name": "Summer 2025", "domain": "Web"}
        )

    def test_new_batch_has_no_students(self) -> None:
        self.assertEqual([], self.batch["students"])

    def test_add_student_is_idempotent(self) -> None:
        path = f"/api/internships/batches/{self.batch['_id']}/students"

        first = self.post(path, {"student": self.student["_id"]})
        second = self.post(path, {"student": self.student["_id"]})

        self.assertEqual(200, first.status_code)
        self.assertEqual([self.student["_id"]], second.get_json()["students"])

    def test_add_student_to_missing_batch_is_not_found(self) -> None:
        response = self.post(
            "/api/internships/batches/507f1f77bcf86cd799439011/students",
            {"student": self.student["_id"]},
        )

        self.assertEqual(404, response.status_code)

    def test_add_student_requires_valid_id(self) -> None:
        response = self.post(
            f"/api/internships/batches/{self.batch['_id']}/students", {"student": "21CS001"}
        )

        self.assertEqual(400, response.status_code)
        self.assertIn("student", response.get_json()["details"])

    def test_list_filters_by_domain_and_populates_students(self) -> None:
        self.post(
            f"/api/internships/batches/{self.batch['_id']}/students",
            {"student": self.student["_id"]},
        )
        self.create("/api/internships/batches", {"name": "Winter 2025", "domain": "ML"})

        [batch] = self.client.get("/api/internships/batches?domain=Web").get_json()

        self.assertEqual("Summer 2025", batch["name"])
        self.assertEqual(["Asha Rao"], [student["name"] for student in batch["students"]])


class InternshipCompanyTestCase(ApiTestCase):
    def test_company_defaults_to_pending(self) -> None:
        company = self.create(
            "/api/internships/companies", {"name": "Acme Labs", "stipend": "15000"}
        )

        self.assertEqual("pending", company["status"])

    def test_unknown_status_is_rejected(self) -> None:
        response = self.post(
            "/api/internships/companies", {"name": "Acme Labs", "status": "paused"}
        )

        self.assertEqual(400, response.status_code)
        self.assertEqual(0, self.count("internship_companies"))
