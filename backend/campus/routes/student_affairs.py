"""Mentoring, certificates, feedback, leave requests and notifications."""

from flask import Blueprint, jsonify, request

from ..crud import ResourceCrud, register_resource
from ..db import utcnow
from ..resources import CERTIFICATES, FEEDBACK, LEAVES, MENTORINGS, NOTIFICATIONS
from ..schemas import DocumentReview, LeaveReview

student_affairs_bp = Blueprint("student_affairs", __name__, url_prefix="/api")

mentorings = ResourceCrud(MENTORINGS)
certificates = ResourceCrud(CERTIFICATES)
feedback = ResourceCrud(FEEDBACK)
leaves = ResourceCrud(LEAVES)
notifications = ResourceCrud(NOTIFICATIONS)

register_resource(student_affairs_bp, mentorings, "/mentoring", filters=("mentor", "mentee"))
register_resource(
    student_affairs_bp, certificates, "/certificates", filters=("student", "status", "type")
)
register_resource(student_affairs_bp, feedback, "/feedback", filters=("student", "teacher"))
register_resource(student_affairs_bp, leaves, "/leaves", filters=("student", "status", "type"))
register_resource(student_affairs_bp, notifications, "/notifications", filters=("target",))


@student_affairs_bp.patch("/certificates/<certificate_id>/review")
def review_certificate(certificate_id: str):
    return jsonify(
        certificates.review(certificate_id, DocumentReview, request.get_json(silent=True))
    )


@student_affairs_bp.patch("/leaves/<leave_id>/review")
def review_leave(leave_id: str):
    payload = request.get_json(silent=True)
    extra = None
    if isinstance(payload, dict) and payload.get("status") == "Approved":
        extra = {"approvalDate": utcnow()}
    return jsonify(leaves.review(leave_id, LeaveReview, payload, pending="Pending", extra=extra))


__all__ = ["student_affairs_bp"]
