"""Attendance registers and semester results."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from pymongo.errors import PyMongoError

from ..crud import ResourceCrud, register_resource, validate_payload
from ..db import parse_object_id, utcnow
from ..errors import BadRequest, ServerError
from ..resources import ATTENDANCE, RESULTS
from ..schemas import ResultPublication

records_bp = Blueprint("records", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)

attendance = ResourceCrud(ATTENDANCE)
results = ResourceCrud(RESULTS)

register_resource(
    records_bp, attendance, "/attendance", filters=("section", "subject", "teacher", "day")
)
register_resource(records_bp, results, "/results", filters=("student", "academicYear", "status"))


@records_bp.get("/attendance/student/<student_id>/stats")
def student_attendance_stats(student_id: str):
    object_id = parse_object_id(student_id, "student")
    try:
        sessions = list(
            attendance.collection.find(
                {"students.studentId": object_id}, {"subject": 1, "students": 1}
            )
        )
    except PyMongoError as exc:
        logger.exception("Failed to load attendance for student %s", student_id)
        raise ServerError(str(exc)) from None

    tally: Dict[str, Dict[str, int]] = defaultdict(
        lambda: {"present": 0, "absent": 0, "late": 0}
    )
    for session in sessions:
        for entry in session.get("students") or []:
            if entry.get("studentId") == object_id:
                tally[session.get("subject")][entry.get("status")] += 1

    subjects = []
    for subject in sorted(tally):
        counts = tally[subject]
        total = sum(counts.values())
        subjects.append(
            {
                "subject": subject,
                **counts,
                "total": total,
                "percentage": round(counts["present"] / total * 100, 2),
            }
        )

    attended = sum(item["present"] for item in subjects)
    held = sum(item["total"] for item in subjects)
    return jsonify(
        {
            "student": str(object_id),
            "subjects": subjects,
            "present": attended,
            "total": held,
            "percentage": round(attended / held * 100, 2) if held else 0,
        }
    )


@records_bp.patch("/attendance/<attendance_id>/lock")
def lock_attendance(attendance_id: str):
    return jsonify(attendance.patch(attendance_id, {"isLocked": True}))


@records_bp.patch("/results/<result_id>/publish")
def publish_result(result_id: str):
    payload: Any = request.get_json(silent=True) or {}
    changes = validate_payload(ResultPublication, payload, RESULTS.name).to_update()
    changes.update(status="published", publishedAt=utcnow())

    updated = results.patch_if(result_id, changes, {"status": "draft"})
    if updated is not None:
        return jsonify(updated)

    current = results.get(result_id)
    if current.get("status") == "published":
        # Publishing again keeps the first publication time.
        return jsonify(current)
    raise BadRequest("Result has already been locked.")


@records_bp.patch("/results/<result_id>/lock")
def lock_result(result_id: str):
    updated = results.patch_if(result_id, {"status": "locked"}, {"status": {"$ne": "locked"}})
    if updated is None:
        updated = results.get(result_id)
    return jsonify(updated)


__all__ = ["records_bp"]
