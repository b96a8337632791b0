"""Placement drives: companies, student applications and selection rounds."""

import logging

from flask import Blueprint, jsonify, request

from ..crud import ResourceCrud, register_resource, validate_payload
from ..db import parse_object_id
from ..errors import ResourceError
from ..resources import PLACEMENT_APPLICATIONS, PLACEMENT_COMPANIES, PLACEMENT_ROUNDS
from ..schemas import AdmitCardChange, ApplicationStatusChange, PlacementRound

placements_bp = Blueprint("placements", __name__, url_prefix="/api/placements")

logger = logging.getLogger(__name__)

companies = ResourceCrud(PLACEMENT_COMPANIES)
applications = ResourceCrud(PLACEMENT_APPLICATIONS)
rounds = ResourceCrud(PLACEMENT_ROUNDS)

register_resource(placements_bp, companies, "/companies", filters=("status",))
register_resource(
    placements_bp, applications, "/applications", filters=("student", "company", "status")
)


@placements_bp.get("/rounds")
def list_rounds():
    company = request.args.get("company", "").strip()
    filters = {"company": parse_object_id(company, "company")} if company else None
    return jsonify(rounds.list(filters))


@placements_bp.post("/rounds")
def add_round():
    payload = request.get_json(silent=True)
    # Rounds can only be added to an existing company.
    round_model = validate_payload(PlacementRound, payload, PLACEMENT_ROUNDS.name)
    companies.get(round_model.company)

    created = rounds.create(payload)
    round_id = parse_object_id(created["_id"])
    try:
        companies.patch(round_model.company, {"rounds": round_id}, operator="$addToSet")
    except ResourceError:
        # A round is only kept once its company lists it.
        logger.warning("Failed to link round %s, removing it", round_id)
        rounds.collection.delete_one({"_id": round_id})
        raise
    return jsonify(created), 201


@placements_bp.patch("/applications/<application_id>/status")
def update_application_status(application_id: str):
    return jsonify(
        applications.apply(
            application_id, ApplicationStatusChange, request.get_json(silent=True)
        )
    )


@placements_bp.patch("/applications/<application_id>/admit-card")
def upload_admit_card(application_id: str):
    return jsonify(
        applications.apply(application_id, AdmitCardChange, request.get_json(silent=True))
    )


__all__ = ["placements_bp"]
