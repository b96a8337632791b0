"""Broadcaster implementations and their wiring into the app."""

from __future__ import annotations

import unittest
from unittest import mock

import mongomock

import support  # noqa: F401  (puts the backend on sys.path)
from app import create_app
from campus.broadcast import NullBroadcaster, SocketIOBroadcaster


class FailingSocketIO:
    def emit(self, event, payload):
        raise RuntimeError("transport down")


class SocketIOBroadcasterTestCase(unittest.TestCase):
    def test_publish_emits_to_all_clients(self) -> None:
        socketio = mock.Mock()

        SocketIOBroadcaster(socketio).publish("eventUpdated", {"title": "Tech Fest"})

        socketio.emit.assert_called_once_with("eventUpdated", {"title": "Tech Fest"})

    def test_emit_failure_is_logged_not_raised(self) -> None:
        broadcaster = SocketIOBroadcaster(FailingSocketIO())

        with self.assertLogs("campus.broadcast", level="WARNING") as captured:
            broadcaster.publish("pollUpdated", {})

        self.assertIn("Failed to broadcast pollUpdated", captured.output[0])

    def test_null_broadcaster_drops_events(self) -> None:
        self.assertIsNone(NullBroadcaster().publish("assignmentUpdated", {}))


class BroadcastFailureTestCase(unittest.TestCase):
    def test_create_succeeds_when_emit_fails(self) -> None:
        database = mongomock.MongoClient()["campus_test"]
        app = create_app(
            database=database,
            broadcaster=SocketIOBroadcaster(FailingSocketIO()),
            TESTING=True,
        )

        with self.assertLogs("campus.broadcast", level="WARNING"):
            response = app.test_client().post(
                "/api/events", json={"title": "Sports Day", "date": "2025-11-02T08:00:00Z"}
            )

        self.assertEqual(201, response.status_code)
        self.assertEqual(1, database["events"].count_documents({}))
