"""Shared fixtures for the API test cases."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path
from typing import Any, Dict, List, Tuple

import mongomock

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app import create_app  # noqa: E402


class RecordingBroadcaster:
    """Keeps every published event in memory."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def publish(self, event: str, payload: Any) -> None:
        self.events.append((event, payload))


class ApiTestCase(unittest.TestCase):
    """Runs each test against a fresh in-memory database."""

    def setUp(self) -> None:
        self.database = mongomock.MongoClient()["campus_test"]
        self.broadcaster = RecordingBroadcaster()
        self.app = create_app(database=self.database, broadcaster=self.broadcaster, TESTING=True)
        self.client = self.app.test_client()

    def post(self, path: str, payload: Any = None):
        return self.client.post(path, json=payload)

    def patch(self, path: str, payload: Any = None):
        return self.client.patch(path, json=payload)

    def create(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self.post(path, payload)
        self.assertEqual(201, response.status_code, response.get_json())
        return response.get_json()

    def create_student(self, roll_number: str = "21CS001", **overrides: Any) -> Dict[str, Any]:
        payload = {
            "name": "Asha Rao",
            "rollNumber": roll_number,
            "email": f"{roll_number.lower()}@campus.edu",
        }
        payload.update(overrides)
        return self.create("/api/students", payload)

    def create_teacher(self, teacher_id: str = "T100", **overrides: Any) -> Dict[str, Any]:
        payload = {
            "name": "Dr. Meera Iyer",
            "teacherId": teacher_id,
            "email": f"{teacher_id.lower()}@campus.edu",
        }
        payload.update(overrides)
        return self.create("/api/teachers", payload)

    def count(self, collection: str) -> int:
        return self.database[collection].count_documents({})
