"""Final-year project groups, submitted documents and evaluations."""

from flask import Blueprint, jsonify, request

from ..crud import ResourceCrud, register_resource
from ..resources import PROJECT_DOCUMENTS, PROJECT_EVALUATIONS, PROJECT_GROUPS
from ..schemas import ProjectDocumentReview

projects_bp = Blueprint("projects", __name__, url_prefix="/api/projects")

groups = ResourceCrud(PROJECT_GROUPS)
documents = ResourceCrud(PROJECT_DOCUMENTS)
evaluations = ResourceCrud(PROJECT_EVALUATIONS)

register_resource(projects_bp, groups, "/groups", filters=("guide", "batch"))
register_resource(projects_bp, documents, "/documents", filters=("group", "type", "status"))
register_resource(projects_bp, evaluations, "/evaluations", filters=("group", "stage"))


@projects_bp.patch("/documents/<document_id>/review")
def review_document(document_id: str):
    return jsonify(
        documents.review(document_id, ProjectDocumentReview, request.get_json(silent=True))
    )


__all__ = ["projects_bp"]
