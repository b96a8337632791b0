"""Internship batches, partner companies and student documents."""

from flask import Blueprint, jsonify, request

from ..crud import ResourceCrud, register_resource, validate_payload
from ..db import to_object_ids
from ..resources import INTERNSHIP_BATCHES, INTERNSHIP_COMPANIES, INTERNSHIP_DOCUMENTS
from ..schemas import BatchEnrollment, DocumentReview

internships_bp = Blueprint("internships", __name__, url_prefix="/api/internships")

batches = ResourceCrud(INTERNSHIP_BATCHES)
companies = ResourceCrud(INTERNSHIP_COMPANIES)
documents = ResourceCrud(INTERNSHIP_DOCUMENTS)

register_resource(internships_bp, batches, "/batches", filters=("domain", "mentor"))
register_resource(internships_bp, companies, "/companies", filters=("status",))
register_resource(
    internships_bp, documents, "/documents", filters=("student", "batch", "company", "status", "type")
)


@internships_bp.post("/batches/<batch_id>/students")
def add_student_to_batch(batch_id: str):
    enrollment = validate_payload(
        BatchEnrollment, request.get_json(silent=True), INTERNSHIP_BATCHES.name
    )
    updated = batches.patch(
        batch_id, {"students": to_object_ids(enrollment.student)}, operator="$addToSet"
    )
    return jsonify(updated)


@internships_bp.patch("/documents/<document_id>/review")
def review_document(document_id: str):
    return jsonify(documents.review(document_id, DocumentReview, request.get_json(silent=True)))


__all__ = ["internships_bp"]
