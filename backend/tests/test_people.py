"""Students, teachers, library, hostels and application wiring."""

from __future__ import annotations

from support import ApiTestCase


class StudentTestCase(ApiTestCase):
    def test_create_returns_document_with_id(self) -> None:
        student = self.create_student(department="CSE", section="A")

        self.assertEqual("21CS001", student["rollNumber"])
        self.assertEqual("CSE", student["department"])
        self.assertIn("createdAt", student)
        self.assertNotIn("guardianName", student)

    def test_duplicate_roll_number_is_rejected(self) -> None:
        self.create_student()

        response = self.post(
            "/api/students",
            {"name": "Another", "rollNumber": "21CS001", "email": "other@campus.edu"},
        )

        self.assertEqual(400, response.status_code)
        self.assertEqual(1, self.count("students"))

    def test_invalid_email_is_rejected(self) -> None:
        response = self.post(
            "/api/students", {"name": "Asha", "rollNumber": "21CS009", "email": "asha"}
        )

        self.assertEqual(400, response.status_code)
        self.assertIn("email", response.get_json()["details"])

    def test_blank_name_is_rejected(self) -> None:
        response = self.post(
            "/api/students", {"name": "   ", "rollNumber": "21CS009", "email": "a@campus.edu"}
        )

        self.assertEqual(400, response.status_code)
        self.assertIn("name", response.get_json()["details"])

    def test_list_filters_by_department(self) -> None:
        self.create_student("21CS001", department="CSE")
        self.create_student("21EC001", department="ECE")

        listed = self.client.get("/api/students?department=ECE").get_json()

        self.assertEqual(["21EC001"], [student["rollNumber"] for student in listed])

    def test_unknown_filter_is_ignored(self) -> None:
        self.create_student()

        listed = self.client.get("/api/students?favouriteColour=blue").get_json()

        self.assertEqual(1, len(listed))


class TeacherTestCase(ApiTestCase):
    def test_duplicate_teacher_id_is_rejected(self) -> None:
        self.create_teacher()

        response = self.post(
            "/api/teachers", {"name": "Dr. Rao", "teacherId": "T100", "email": "rao@campus.edu"}
        )

        self.assertEqual(400, response.status_code)
        self.assertEqual(1, self.count("teachers"))


class LibraryTestCase(ApiTestCase):
    def test_books_without_isbn_do_not_collide(self) -> None:
        self.create("/api/library", {"title": "Operating Systems"})
        self.create("/api/library", {"title": "Computer Networks"})

        self.assertEqual(2, self.count("library"))

    def test_update_copies(self) -> None:
        book = self.create(
            "/api/library", {"title": "SICP", "isbn": "9780262510875", "totalCopies": 4, "availableCopies": 4}
        )

        response = self.patch(f"/api/library/{book['_id']}/copies", {"availableCopies": 2})

        self.assertEqual(200, response.status_code)
        updated = response.get_json()
        self.assertEqual((2, 4), (updated["availableCopies"], updated["totalCopies"]))

    def test_update_copies_needs_a_change(self) -> None:
        book = self.create("/api/library", {"title": "SICP"})

        response = self.patch(f"/api/library/{book['_id']}/copies", {})

        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": "No changes supplied."}, response.get_json())

    def test_negative_copies_are_rejected(self) -> None:
        book = self.create("/api/library", {"title": "SICP"})

        response = self.patch(f"/api/library/{book['_id']}/copies", {"availableCopies": -1})

        self.assertEqual(400, response.status_code)


class HostelTestCase(ApiTestCase):
    def test_list_populates_warden(self) -> None:
        warden = self.create_teacher()
        self.create("/api/hostels", {"name": "Block A", "warden": warden["_id"], "rooms": ["A101"]})

        [hostel] = self.client.get("/api/hostels").get_json()

        self.assertEqual("Dr. Meera Iyer", hostel["warden"]["name"])
        self.assertEqual(["A101"], hostel["rooms"])


class AppTestCase(ApiTestCase):
    def test_health(self) -> None:
        response = self.client.get("/api/health")

        self.assertEqual(200, response.status_code)
        self.assertEqual({"ok": True}, response.get_json())

    def test_notifications_are_stamped_with_date(self) -> None:
        notification = self.create(
            "/api/notifications", {"title": "Holiday", "message": "Campus closed Friday"}
        )

        self.assertEqual("all", notification["target"])
        self.assertIn("date", notification)
